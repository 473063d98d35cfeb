"""
Translation Backfill - translate stored titles and flag the rows

Rows are scanned in keyset-paginated batches. Translations of a batch run in a
bounded thread pool; every database call stays on the calling thread. Each
batch is committed before the next one is read, so an interrupted run leaves
processed rows flagged and the rest untouched.
"""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from core.config import settings
from core.errors import BackfillWriteError, TranslationUnavailable
from services.repository import SqlTranslationRepository, TranslationRepository
from services.targets import BackfillTarget

logger = logging.getLogger(__name__)

Translator = Callable[[str], str]


@dataclass
class BackfillResult:
    """Counters of one backfill run over one table"""
    table: str
    scanned: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    interrupted: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


def summarize(results: List[BackfillResult]) -> str:
    """Human readable summary across tables"""
    succeeded = sum(result.succeeded for result in results)
    failed = sum(result.failed for result in results)
    message = f"Scan complete, translated: {succeeded}, failed: {failed}"
    if any(result.interrupted for result in results):
        message += " (stopped early, run again to continue)"
    return message


class BackfillJob:
    """
    One parameterized backfill over a repository

    Args:
        repository: Table access (schema ensure, scan, update)
        translator: Callable returning the translation or raising TranslationUnavailable
        batch_size: Rows read per page
        max_workers: Concurrent translation calls
        time_budget: Seconds the whole run may take, 0 or None for no limit
        cancel_event: Set it from another thread to stop after the current batch
    """

    def __init__(
        self,
        repository: TranslationRepository,
        translator: Translator,
        batch_size: int = 100,
        max_workers: int = 4,
        time_budget: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.repository = repository
        self.translator = translator
        self.batch_size = batch_size
        self.max_workers = max_workers
        self.time_budget = time_budget or None
        self.cancel_event = cancel_event or threading.Event()

    def _should_stop(self, deadline: Optional[float]) -> bool:
        if self.cancel_event.is_set():
            logger.warning(f"Backfill of {self.repository.table_name} cancelled")
            return True
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning(f"Backfill of {self.repository.table_name} ran out of its time budget")
            return True
        return False

    def _translate_row(self, texts: Dict[str, str]) -> Dict[str, str]:
        """Translate every field of one row; any failure fails the whole row"""
        return {column: self.translator(value) for column, value in texts.items()}

    def run(self) -> BackfillResult:
        """Ensure the flag column, then translate every unflagged row"""
        result = BackfillResult(table=self.repository.table_name)

        self.repository.validate()
        self.repository.ensure_flag_column()

        deadline = time.monotonic() + self.time_budget if self.time_budget else None
        last_id = None

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="translate") as pool:
            while True:
                if self._should_stop(deadline):
                    result.interrupted = True
                    break

                rows = self.repository.fetch_pending(after_id=last_id, limit=self.batch_size)
                if not rows:
                    break

                last_id = rows[-1].id
                result.scanned += len(rows)
                logger.info(
                    f"Processing {len(rows)} row(s) of {result.table} "
                    f"({result.scanned} scanned so far)"
                )

                futures = {}
                for row in rows:
                    texts = {
                        column: value for column, value in row.texts.items()
                        if value and value.strip()
                    }
                    if not texts:
                        result.skipped += 1
                        continue
                    futures[pool.submit(self._translate_row, texts)] = row

                for future in as_completed(futures):
                    row = futures[future]
                    try:
                        translations = future.result()
                    except TranslationUnavailable as e:
                        result.failed += 1
                        logger.warning(f"Translation failed for {result.table} id={row.id}: {e}")
                        continue
                    except Exception:
                        result.failed += 1
                        logger.exception(f"Unexpected translator error for {result.table} id={row.id}")
                        continue

                    try:
                        saved = self.repository.mark_translated(row.id, translations)
                    except BackfillWriteError as e:
                        result.failed += 1
                        logger.warning(f"Save failed for {result.table} id={row.id}: {e}")
                        continue

                    if saved:
                        result.succeeded += 1
                        logger.debug(f"Translated {result.table} id={row.id}: {translations}")
                    else:
                        result.failed += 1
                        logger.warning(f"Row {result.table} id={row.id} disappeared before update")

                self.repository.commit()

        logger.info(
            f"Backfill of {result.table} finished: scanned={result.scanned} "
            f"succeeded={result.succeeded} failed={result.failed} skipped={result.skipped}"
        )
        return result


def run_backfill(
    db: Session,
    targets: List[BackfillTarget],
    translator: Translator,
    cancel_event: Optional[threading.Event] = None,
) -> List[BackfillResult]:
    """Run the backfill over each target with the configured batch/worker settings"""
    results = []
    for target in targets:
        job = BackfillJob(
            repository=SqlTranslationRepository(db, target),
            translator=translator,
            batch_size=settings.BACKFILL_BATCH_SIZE,
            max_workers=settings.BACKFILL_MAX_WORKERS,
            time_budget=settings.BACKFILL_TIME_BUDGET,
            cancel_event=cancel_event,
        )
        results.append(job.run())
    return results
