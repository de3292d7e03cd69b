import time
from typing import Optional

from fastapi import APIRouter

from ...api.models import APIResponse, ok
from .service import LeagueTeamSeasonService


def create_routers(service: LeagueTeamSeasonService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter(prefix="/league-team-season")
    private = APIRouter(prefix="/league-team-season")

    @public.get("", response_model=APIResponse)
    async def list_mappings(
        league_id: Optional[str] = None,
        team_id: Optional[str] = None,
        season: Optional[str] = None,
    ):
        start_time = time.time()
        return ok(await service.list_mappings(league_id, team_id, season), start_time)

    @public.get("/teams", response_model=APIResponse)
    async def list_teams(league_id: Optional[str] = None, season: Optional[str] = None):
        """Teams of one league in one season, ordered by name"""
        start_time = time.time()
        return ok(await service.list_teams(league_id, season), start_time)

    @private.delete("/{league_id}/{team_id}/{season}", response_model=APIResponse)
    async def delete_mapping(league_id: str, team_id: str, season: str):
        start_time = time.time()
        await service.delete_mapping(league_id, team_id, season)
        return ok({"deleted": True}, start_time)

    return public, private
