"""
Celery application configuration
Task queue for background processing (translation backfill)
"""
import logging
from celery import Celery

from core.config import settings

logger = logging.getLogger(__name__)

# Initialize Celery app
celery_app = Celery(
    "movie_cms",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "workers.backfill_task",
    ]
)

# Celery configuration
celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=3600,  # 1 hour max per task
    task_soft_time_limit=3000,  # 50 minutes soft limit
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,  # Restart worker after 50 tasks (prevent memory leaks)
)

# Periodic backfill (Celery Beat schedule)
if settings.BACKFILL_SCHEDULE_MINUTES > 0:
    celery_app.conf.beat_schedule = {
        'translation-backfill': {
            'task': 'workers.backfill_task.run_translation_backfill',
            'schedule': settings.BACKFILL_SCHEDULE_MINUTES * 60.0,
        },
    }

# Task routes (queue assignment)
celery_app.conf.task_routes = {
    'workers.backfill_task.*': {'queue': 'translation'},
}

# Default queue
celery_app.conf.task_default_queue = 'default'

# Retry policy
celery_app.conf.task_default_retry_delay = 60  # Retry after 1 minute
celery_app.conf.task_max_retries = 3

logger.debug("Celery app configured")
