#!/usr/bin/env python3
"""
Translation Backfill Script
Runs the translation backfill from the command line, Ctrl+C stops after the current batch
"""
import argparse
import logging
import sys
import os
import threading

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import settings
from core.database import get_db_context
from core.errors import CmsError
from services.backfill import run_backfill, summarize
from services.targets import load_backfill_targets, select_targets
from services.translation_client import TranslationClient


# ANSI color codes for terminal output
class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Translate untranslated titles and flag the rows")
    parser.add_argument("--table", help="Only backfill this configured table")
    parser.add_argument("--targets-file", help="JSON file listing backfill tables")
    parser.add_argument("--api-url", default=settings.TRANSLATION_API_URL, help="Translation endpoint")
    return parser.parse_args(argv)


def wait_for_worker(worker: threading.Thread, cancel_event: threading.Event) -> bool:
    """
    Wait for the backfill thread; Ctrl+C asks it to stop after the current batch

    Returns True when the wait was interrupted.
    """
    try:
        while worker.is_alive():
            worker.join(timeout=0.5)
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Stopping after the current batch...{Colors.RESET}")
        cancel_event.set()
        worker.join()
        return True
    return False


def main(argv=None):
    """Entry point"""
    args = parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    targets = select_targets(load_backfill_targets(args.targets_file), args.table)
    client = TranslationClient(
        api_url=args.api_url,
        timeout=settings.TRANSLATION_TIMEOUT,
        max_retries=settings.TRANSLATION_MAX_RETRIES,
        backoff_factor=settings.TRANSLATION_BACKOFF_FACTOR,
    )
    cancel_event = threading.Event()
    outcome = {}

    def work():
        try:
            with get_db_context() as db:
                outcome["results"] = run_backfill(db, targets, client.translate, cancel_event)
        except Exception as e:
            outcome["error"] = e

    worker = threading.Thread(target=work, name="backfill")
    worker.start()
    try:
        wait_for_worker(worker, cancel_event)
    finally:
        client.close()

    if "error" in outcome:
        print(f"{Colors.RED}{Colors.BOLD}Backfill failed:{Colors.RESET} {outcome['error']}")
        return 1

    results = outcome["results"]
    for result in results:
        print(
            f"  {result.table:<25} scanned={result.scanned} succeeded={result.succeeded} "
            f"failed={result.failed} skipped={result.skipped}"
        )
    print(f"{Colors.GREEN}{Colors.BOLD}{summarize(results)}{Colors.RESET}")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except CmsError as e:
        print(f"{Colors.RED}{e}{Colors.RESET}")
        sys.exit(1)
