"""Prozesslokale Abhängigkeiten des Import-Workers."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.config import APIConfig, Settings, settings as default_settings
from ..database.manager import DatabaseManager
from ..modules.api_football.client import ApiFootballClient
from ..modules.teams.repository import TeamRepository
from ..modules.teams.service import TeamsService

logger = logging.getLogger(__name__)


@dataclass
class WorkerRuntime:
    settings: Settings
    db_manager: DatabaseManager
    teams_service: TeamsService


_runtime: Optional[WorkerRuntime] = None


def build_runtime(settings: Optional[Settings] = None) -> WorkerRuntime:
    """Datenbank und API-Football-Client für Jobs aufbauen (ohne Response-Cache)"""
    settings = settings or default_settings
    db_manager = DatabaseManager(settings)
    db_manager.initialize_sync()
    db_manager.create_tables()

    client = ApiFootballClient(APIConfig.api_football(settings), cache=None)
    teams_service = TeamsService(TeamRepository(db_manager), client)
    logger.info("Worker runtime ready")
    return WorkerRuntime(settings=settings, db_manager=db_manager, teams_service=teams_service)


def set_runtime(runtime: Optional[WorkerRuntime]) -> None:
    global _runtime
    _runtime = runtime


def get_runtime() -> WorkerRuntime:
    global _runtime
    if _runtime is None:
        _runtime = build_runtime()
    return _runtime


def current_runtime() -> Optional[WorkerRuntime]:
    """Runtime ohne Lazy-Aufbau (für Signal-Handler)"""
    return _runtime
