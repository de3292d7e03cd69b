"""
Import Worker Entrypoint

Startet einen Celery-Worker auf der Import-Queue:

  python -m kickoffhub.worker.main
  kickoffhub worker --concurrency 4

Ablauf: Logging konfigurieren, Runtime (Datenbank, API-Football) aufbauen,
auf den Broker warten und erst dann Jobs konsumieren. SIGTERM/SIGINT lösen
Celerys Warm Shutdown aus (laufender Job wird beendet).
"""

import logging
import sys
from typing import Optional

from celery import Celery
from celery.signals import worker_process_init, worker_process_shutdown, worker_ready, worker_shutdown

from ..common.logging_utils import configure_logging
from ..core.config import Settings, settings as default_settings
from .celery_app import create_celery
from .runtime import build_runtime, current_runtime, set_runtime

logger = logging.getLogger("kickoffhub.worker")


def _dispose_database():
    runtime = current_runtime()
    if runtime is not None:
        runtime.db_manager.dispose()


@worker_ready.connect
def _on_worker_ready(sender=None, **kwargs):
    logger.info(f"Import worker ready: {getattr(sender, 'hostname', 'worker')}")


@worker_process_init.connect
def _on_worker_process_init(**kwargs):
    # geforkte Kinder dürfen keine Verbindungen des Elternprozesses wiederverwenden
    _dispose_database()


@worker_process_shutdown.connect
def _on_worker_process_shutdown(**kwargs):
    _dispose_database()


@worker_shutdown.connect
def _on_worker_shutdown(sender=None, **kwargs):
    _dispose_database()
    logger.info("Import worker shut down gracefully")


def wait_for_broker(celery: Celery, max_retries: int) -> None:
    """Blockiert, bis der Broker erreichbar ist (oder ``max_retries`` erschöpft sind)"""

    def _on_error(exc, interval):
        logger.warning(f"Broker not reachable ({exc}), retrying in {interval:.1f}s")

    with celery.connection_for_write() as connection:
        connection.ensure_connection(max_retries=max_retries, errback=_on_error)
    logger.info("Import queue broker is ready")


def run_worker(settings: Optional[Settings] = None, concurrency: Optional[int] = None) -> int:
    settings = settings or default_settings
    configure_logging(service="worker", level=settings.log_level)

    celery = create_celery(settings)
    if celery is None:
        logger.error("REDIS_URL is not set; the import worker has nothing to consume")
        return 1

    set_runtime(build_runtime(settings))

    try:
        wait_for_broker(celery, settings.worker_ready_max_retries)
    except Exception as e:
        logger.error(f"Failed to connect to the import queue broker: {e}")
        return 1

    celery.worker_main(
        [
            "worker",
            f"--loglevel={settings.log_level.upper()}",
            "-Q",
            settings.import_queue_name,
            "--pool=prefork",
            f"--concurrency={concurrency or settings.worker_concurrency}",
            "--prefetch-multiplier=1",
            "--hostname=kickoffhub-imports@%h",
        ]
    )
    return 0


if __name__ == "__main__":
    sys.exit(run_worker())
