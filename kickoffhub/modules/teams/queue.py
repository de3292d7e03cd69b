"""
Team Import Queue
Producer-Seite der Hintergrund-Imports: legt ``teams-import`` Jobs in die Celery-Queue.
"""

import logging
from typing import Any, Optional

from celery import Celery
from kombu.exceptions import OperationalError
from pydantic import ValidationError

from ...core.exceptions import ValidationException
from ...domain.models import ImportJobPayload
from ...worker.celery_app import RUN_JOB_TASK

TEAMS_IMPORT_JOB = "teams-import"

logger = logging.getLogger(__name__)


class TeamImportQueue:
    """Enqueue-Schnittstelle; ohne Celery-App (kein REDIS_URL) ist die Queue deaktiviert"""

    def __init__(self, celery_app: Optional[Celery], queue_name: str = "kickoffhub-imports"):
        self.celery_app = celery_app
        self.queue_name = queue_name
        if celery_app is None:
            logger.warning("REDIS_URL is not set. Team import background jobs are disabled.")

    @property
    def enabled(self) -> bool:
        return self.celery_app is not None

    def enqueue(self, payload: Any) -> Optional[str]:
        """Legt einen Import-Job an und gibt die Job-ID zurück.

        Gibt ``None`` zurück, wenn die Queue deaktiviert oder der Broker nicht
        erreichbar ist. Ungültige Payloads führen zu ``ValidationException``.
        """
        try:
            job = ImportJobPayload.model_validate(payload)
        except ValidationError as e:
            raise ValidationException(
                "Invalid import job payload", details=e.errors(include_url=False)
            ) from None

        if self.celery_app is None:
            logger.warning("Cannot enqueue team import job because Redis is disabled.")
            return None

        try:
            result = self.celery_app.send_task(
                RUN_JOB_TASK,
                args=[TEAMS_IMPORT_JOB, job.model_dump()],
                queue=self.queue_name,
                retry=True,
                retry_policy={"max_retries": 2, "interval_start": 0, "interval_step": 0.5},
            )
        except OperationalError as e:
            logger.error(f"Failed to enqueue {TEAMS_IMPORT_JOB} job {job.model_dump()}: {e}")
            return None

        logger.info(
            f"Enqueued {TEAMS_IMPORT_JOB} job {result.id} "
            f"(league={job.league_id}, season={job.season})"
        )
        return result.id
