"""
Business logic services for the Movie CMS
"""
from .translation_client import TranslationClient
from .backfill import BackfillJob, BackfillResult, run_backfill

__all__ = ["TranslationClient", "BackfillJob", "BackfillResult", "run_backfill"]
