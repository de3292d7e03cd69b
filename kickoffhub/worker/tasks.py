"""
Celery Tasks
Ein generischer Task, der Jobs nach Namen an die Handler in ``jobs`` verteilt.
"""

import asyncio
import logging
import time
from typing import Any

from celery import shared_task

from ..core.exceptions import UpstreamError
from .celery_app import RUN_JOB_TASK
from .jobs import UnknownJobError, execute_job
from .runtime import get_runtime

logger = logging.getLogger(__name__)


@shared_task(bind=True, name=RUN_JOB_TASK)
def run_job(self, name: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Führt einen Job aus und protokolliert das Ergebnis.

    Provider-Fehler werden mit exponentiellem Backoff wiederholt, alle anderen
    Fehler markieren nur diesen Job als fehlgeschlagen.
    """
    job_id = self.request.id
    runtime = get_runtime()
    start = time.time()

    try:
        result = asyncio.run(execute_job(name, payload, runtime))
    except UpstreamError as e:
        retries = self.request.retries
        max_retries = runtime.settings.import_job_max_retries
        logger.error(
            f"Import job failed: id={job_id} name={name} error={e} "
            f"(attempt {retries + 1}/{max_retries + 1})"
        )
        if retries >= max_retries:
            raise
        countdown = min(2**retries * 10, runtime.settings.import_job_retry_backoff_max)
        raise self.retry(exc=e, countdown=countdown, max_retries=max_retries)
    except UnknownJobError as e:
        logger.error(f"Import job failed: id={job_id} name={name} error={e}")
        raise
    except Exception as e:
        logger.exception(f"Import job failed: id={job_id} name={name} error={e}")
        raise

    logger.info(
        f"Import job completed: id={job_id} name={name} "
        f"imported={result.get('imported')} mapped={result.get('mappings_inserted')} "
        f"duration={time.time() - start:.2f}s"
    )
    return result
