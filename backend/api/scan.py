"""
Scan API endpoints
Translation backfill: flag column check, synchronous run, background run
Every failure is answered as {"code": 0, "msg": <error>}
"""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Callable, Generator, List, Optional

from core.database import get_db
from api.responses import ApiMessage, success, failure
from services.backfill import run_backfill, summarize
from services.repository import SqlTranslationRepository
from services.targets import BackfillTarget, load_backfill_targets, select_targets
from services.translation_client import TranslationClient
from workers.backfill_task import run_translation_backfill

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Dependencies
# ============================================

def get_translator() -> Generator[Callable[[str], str], None, None]:
    """
    Dependency providing the translate callable
    Usage: translator = Depends(get_translator)
    """
    client = TranslationClient.from_settings()
    try:
        yield client.translate
    finally:
        client.close()


def get_backfill_targets() -> List[BackfillTarget]:
    return load_backfill_targets()


def enqueue_backfill(table: Optional[str]) -> str:
    """Queue the Celery backfill task, returns the task id"""
    return run_translation_backfill.delay(table=table).id


# ============================================
# Scan Endpoints
# ============================================
# Plain def: FastAPI runs these in its threadpool, they block on the database
# and on the translation service.

@router.get("/check-translate-field", response_model=ApiMessage)
def check_translate_field(
    table: Optional[str] = Query(None, description="Backfill table, all configured tables if omitted"),
    db: Session = Depends(get_db),
    targets: List[BackfillTarget] = Depends(get_backfill_targets),
):
    """
    Ensure the translated flag column exists

    Adds the column with default 0 when missing; safe to call repeatedly.
    """
    try:
        added = {}
        for target in select_targets(targets, table):
            added[target.table_name] = SqlTranslationRepository(db, target).ensure_flag_column()
    except Exception as e:
        logger.exception("Translated column check failed")
        return failure(str(e))

    if any(added.values()):
        return success("Translated column added", data=added)
    return success("Translated column already exists", data=added)


@router.get("/scan-and-translate", response_model=ApiMessage)
def scan_and_translate(
    table: Optional[str] = Query(None, description="Backfill table, all configured tables if omitted"),
    db: Session = Depends(get_db),
    targets: List[BackfillTarget] = Depends(get_backfill_targets),
    translator: Callable[[str], str] = Depends(get_translator),
):
    """
    Translate every untranslated title and flag the rows

    Rows whose translation fails stay unflagged and are picked up by the next run.
    """
    try:
        results = run_backfill(db, select_targets(targets, table), translator)
    except Exception as e:
        logger.exception("Scan and translate failed")
        return failure(str(e))

    return success(summarize(results), data=[result.to_dict() for result in results])


@router.post("/scan-and-translate/async", response_model=ApiMessage)
def scan_and_translate_async(
    table: Optional[str] = Query(None, description="Backfill table, all configured tables if omitted"),
    targets: List[BackfillTarget] = Depends(get_backfill_targets),
):
    """
    Queue the backfill on a Celery worker instead of running it in the request
    """
    try:
        select_targets(targets, table)
        task_id = enqueue_backfill(table)
    except Exception as e:
        logger.exception("Failed to queue backfill")
        return failure(str(e))

    logger.info(f"Queued translation backfill task {task_id} (table={table})")
    return success("Backfill queued", data={"task_id": task_id})
