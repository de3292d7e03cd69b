"""Shared infrastructure every feature module may rely on."""

import logging
from typing import Optional

from ..common.cache import RedisCache
from ..core.config import Settings
from ..core.container import Container, register_if_missing
from ..core.tokens import Tokens
from ..database.manager import DatabaseManager
from ..monitoring.prometheus_metrics import PrometheusMetrics


def register_infrastructure(
    container: Container,
    settings: Settings,
    *,
    db_manager: Optional[DatabaseManager] = None,
    cache: Optional[RedisCache] = None,
    metrics: Optional[PrometheusMetrics] = None,
) -> Container:
    """Registriert Settings, Logger, Datenbank, Cache und Metriken.

    Bereits vorhandene Einträge bleiben unangetastet, so können Tests eigene
    Implementierungen vorab in den Container legen.
    """
    register_if_missing(container, Tokens.SETTINGS, settings)
    register_if_missing(container, Tokens.LOGGER, logging.getLogger("kickoffhub"))
    register_if_missing(
        container, Tokens.DATABASE, db_manager or (lambda: DatabaseManager(settings))
    )
    register_if_missing(container, Tokens.CACHE, cache or (lambda: RedisCache(settings.redis_url)))
    register_if_missing(container, Tokens.METRICS, metrics or (lambda: PrometheusMetrics(settings)))
    return container
