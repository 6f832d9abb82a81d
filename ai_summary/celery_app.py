"""
Celery application for background generation and cache maintenance.
"""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from ai_summary.config import configure_logging, get_settings

_settings = get_settings()
configure_logging(_settings)

celery_app = Celery(
    "ai_summary",
    broker=_settings.celery.broker_url,
    backend=_settings.celery.result_backend,
    include=["ai_summary.tasks"],
)

celery_app.conf.update(
    # Task execution settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=_settings.celery.task_always_eager,

    # Task result settings
    result_expires=86400,  # 24 hours

    # Task acknowledgment settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # One provider call at a time per worker process
    worker_prefetch_multiplier=1,
    task_time_limit=120,
    task_soft_time_limit=90,

    # Beat scheduler (for periodic tasks)
    beat_schedule={
        "cleanup-expired-cache": {
            "task": "ai_summary.cleanup_expired_cache",
            "schedule": crontab(hour=3, minute=0),  # Daily
        },
    },
)

__all__ = ["celery_app"]
