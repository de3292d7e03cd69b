"""
Celery Application
Broker und Result-Backend sind Redis (REDIS_URL); ohne REDIS_URL gibt es keine Queue.
"""

from typing import Optional

from celery import Celery

from ..core.config import Settings

RUN_JOB_TASK = "kickoffhub.imports.run_job"


def create_celery(settings: Settings) -> Optional[Celery]:
    """Celery-App für Producer (API) und Consumer (Worker), ``None`` ohne REDIS_URL"""
    if not settings.redis_url:
        return None

    celery = Celery(
        "kickoffhub",
        broker=settings.redis_url,
        backend=settings.redis_url,
        include=["kickoffhub.worker.tasks"],
    )

    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_default_queue=settings.import_queue_name,
        task_routes={RUN_JOB_TASK: {"queue": settings.import_queue_name}},
        task_track_started=True,
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        worker_concurrency=settings.worker_concurrency,
        worker_hijack_root_logger=False,
        broker_connection_retry_on_startup=True,
        result_expires=24 * 60 * 60,
        task_time_limit=30 * 60,
        task_soft_time_limit=15 * 60,
    )

    return celery
