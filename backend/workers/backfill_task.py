"""
Translation backfill task
Runs the same job as GET /api/scan/scan-and-translate on a worker
"""
import logging
from typing import Dict, Optional

from celery.exceptions import SoftTimeLimitExceeded
from sqlalchemy.exc import OperationalError

from workers.celery_app import celery_app
from core.database import get_db_context
from services.backfill import run_backfill, summarize
from services.targets import load_backfill_targets, select_targets
from services.translation_client import TranslationClient

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="workers.backfill_task.run_translation_backfill", max_retries=3)
def run_translation_backfill(self, table: Optional[str] = None) -> Dict:
    """
    Translate untranslated titles of the configured tables

    Rows that fail translation stay unflagged; the next run (manual or beat
    schedule) picks them up. Only a lost database connection retries the task.

    Args:
        table: Restrict the run to one configured table

    Returns:
        dict: Summary message and per-table counters
    """
    logger.info(f"Starting translation backfill (table={table})")

    targets = select_targets(load_backfill_targets(), table)
    client = TranslationClient.from_settings()

    try:
        with get_db_context() as db:
            results = run_backfill(db, targets, client.translate)
    except OperationalError as e:
        logger.error(f"Database unavailable during backfill: {str(e)}")
        raise self.retry(exc=e, countdown=60)
    except SoftTimeLimitExceeded:
        logger.warning("Translation backfill hit the soft time limit, finished batches are kept")
        raise
    finally:
        client.close()

    message = summarize(results)
    logger.info(message)

    return {
        "status": "completed",
        "message": message,
        "results": [result.to_dict() for result in results],
    }
