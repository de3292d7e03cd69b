"""
Teams API Endpoints
API Routen für Team-bezogene Operationen
"""

import time
from typing import Optional

from fastapi import APIRouter, Response, status

from ...api.models import (
    APIResponse,
    TeamCreateRequest,
    TeamImportRequest,
    TeamUpdateRequest,
    ok,
)
from .service import TeamsService


def create_routers(service: TeamsService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter(prefix="/teams")
    private = APIRouter(prefix="/teams")

    # statische Pfade vor /{team_id}
    @public.get("", response_model=APIResponse)
    async def list_teams(page: Optional[str] = None, limit: Optional[str] = None):
        start_time = time.time()
        return ok(await service.list_teams(page, limit), start_time)

    @public.get("/popular", response_model=APIResponse)
    async def list_popular_teams(page: Optional[str] = None, limit: Optional[str] = None):
        start_time = time.time()
        return ok(await service.list_teams(page, limit, popular_only=True), start_time)

    @public.get("/search", response_model=APIResponse)
    async def search_teams(name: Optional[str] = None, limit: Optional[str] = None):
        start_time = time.time()
        return ok(await service.search_teams(name, limit), start_time)

    @public.get("/league/{league_id}", response_model=APIResponse)
    async def get_teams_by_league(league_id: str, season: Optional[str] = None):
        start_time = time.time()
        return ok(await service.get_teams_by_league(league_id, season), start_time)

    @public.get("/{team_id}", response_model=APIResponse)
    async def get_team(team_id: str):
        start_time = time.time()
        return ok(await service.get_team(team_id), start_time)

    @public.get("/{team_id}/statistics", response_model=APIResponse)
    async def get_team_statistics(
        team_id: str, league: Optional[str] = None, season: Optional[str] = None
    ):
        """Team statistics proxied from API-Football"""
        start_time = time.time()
        return ok(await service.get_team_statistics(team_id, league, season), start_time)

    @private.post("/import", response_model=APIResponse)
    async def import_teams(body: TeamImportRequest, response: Response):
        """Import teams of a league/season, optionally through the background queue"""
        start_time = time.time()
        result = await service.import_teams(body.league, body.season, body.background)
        if result.get("queued"):
            response.status_code = status.HTTP_202_ACCEPTED
        return ok(result, start_time)

    @private.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
    async def create_team(body: TeamCreateRequest):
        start_time = time.time()
        return ok(await service.create_team(body.model_dump()), start_time)

    @private.put("/{team_id}", response_model=APIResponse)
    async def update_team(team_id: str, body: TeamUpdateRequest):
        start_time = time.time()
        return ok(await service.update_team(team_id, body.model_dump(exclude_unset=True)), start_time)

    @private.delete("/{team_id}", response_model=APIResponse)
    async def delete_team(team_id: str):
        start_time = time.time()
        await service.delete_team(team_id)
        return ok({"deleted": True}, start_time)

    return public, private
