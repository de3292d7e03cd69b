import time
from typing import Optional

from fastapi import APIRouter, status

from ...api.models import APIResponse, PlayerMappingRequest, ok
from .service import PlayerTeamLeagueSeasonService


def create_routers(service: PlayerTeamLeagueSeasonService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter(prefix="/player-team-league-season")
    private = APIRouter(prefix="/player-team-league-season")

    @public.get("/players", response_model=APIResponse)
    async def list_players(
        league_id: Optional[str] = None,
        team_id: Optional[str] = None,
        season: Optional[str] = None,
    ):
        """Squad of one team in one league and season"""
        start_time = time.time()
        return ok(await service.list_players(league_id, team_id, season), start_time)

    @private.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
    async def create_mapping(body: PlayerMappingRequest):
        start_time = time.time()
        return ok(await service.create_mapping(body.model_dump()), start_time)

    @private.put("/{player_id}/{league_id}/{team_id}/{season}", response_model=APIResponse)
    async def update_mapping(
        player_id: str, league_id: str, team_id: str, season: str, body: PlayerMappingRequest
    ):
        start_time = time.time()
        identifiers = {"player_id": player_id, "league_id": league_id, "team_id": team_id, "season": season}
        return ok(await service.update_mapping(identifiers, body.model_dump(exclude_unset=True)), start_time)

    @private.delete("/{player_id}/{league_id}/{team_id}/{season}", response_model=APIResponse)
    async def delete_mapping(player_id: str, league_id: str, team_id: str, season: str):
        start_time = time.time()
        await service.delete_mapping(
            {"player_id": player_id, "league_id": league_id, "team_id": team_id, "season": season}
        )
        return ok({"deleted": True}, start_time)

    return public, private
