"""Job-Dispatch nach Namen."""

from typing import Any, Awaitable, Callable

from ..domain.models import ImportJobPayload
from ..modules.teams.queue import TEAMS_IMPORT_JOB
from .runtime import WorkerRuntime


class UnknownJobError(Exception):
    """Job-Name ohne registrierten Handler"""


async def _run_teams_import(runtime: WorkerRuntime, payload: dict[str, Any]) -> dict[str, Any]:
    job = ImportJobPayload.model_validate(payload)
    return await runtime.teams_service.perform_team_import(job.league_id, job.season)


JOB_HANDLERS: dict[str, Callable[[WorkerRuntime, dict[str, Any]], Awaitable[dict[str, Any]]]] = {
    TEAMS_IMPORT_JOB: _run_teams_import,
}


async def execute_job(name: str, payload: dict[str, Any], runtime: WorkerRuntime) -> dict[str, Any]:
    handler = JOB_HANDLERS.get(name)
    if handler is None:
        raise UnknownJobError(f"Unknown job name: {name}")
    return await handler(runtime, payload)
