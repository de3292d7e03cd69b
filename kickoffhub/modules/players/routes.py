"""
Players API Endpoints
API Routen für Spieler-bezogene Operationen
"""

import time
from typing import Optional

from fastapi import APIRouter, status

from ...api.models import (
    APIResponse,
    PlayerCreateRequest,
    PlayerImportRequest,
    PlayerUpdateRequest,
    ok,
)
from .service import PlayersService


def create_routers(service: PlayersService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter(prefix="/players")
    private = APIRouter(prefix="/players")

    # statische Pfade vor /{player_id}
    @public.get("", response_model=APIResponse)
    async def list_players(
        page: Optional[str] = None, limit: Optional[str] = None, nationality: Optional[str] = None
    ):
        start_time = time.time()
        return ok(await service.list_players(page, limit, nationality), start_time)

    @public.get("/count", response_model=APIResponse)
    async def count_players():
        start_time = time.time()
        return ok(await service.count_players(), start_time)

    @public.get("/popular", response_model=APIResponse)
    async def list_popular_players(page: Optional[str] = None, limit: Optional[str] = None):
        start_time = time.time()
        return ok(await service.list_players(page, limit, popular_only=True), start_time)

    @public.get("/search", response_model=APIResponse)
    async def search_players(name: Optional[str] = None, limit: Optional[str] = None):
        start_time = time.time()
        return ok(await service.search_players(name, limit), start_time)

    @public.get("/{player_id}", response_model=APIResponse)
    async def get_player(player_id: str):
        start_time = time.time()
        return ok(await service.get_player(player_id), start_time)

    @public.get("/{player_id}/statistics", response_model=APIResponse)
    async def get_player_statistics(
        player_id: str,
        season: Optional[str] = None,
        league: Optional[str] = None,
        team: Optional[str] = None,
    ):
        """Player statistics proxied from API-Football"""
        start_time = time.time()
        return ok(await service.get_player_statistics(player_id, season, league, team), start_time)

    @private.post("/import", response_model=APIResponse)
    async def import_players(body: PlayerImportRequest):
        start_time = time.time()
        return ok(
            await service.import_players(body.league, body.team, body.season, body.page), start_time
        )

    @private.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
    async def create_player(body: PlayerCreateRequest):
        start_time = time.time()
        return ok(await service.create_player(body.model_dump(exclude_unset=True)), start_time)

    @private.put("/{player_id}", response_model=APIResponse)
    async def update_player(player_id: str, body: PlayerUpdateRequest):
        start_time = time.time()
        return ok(await service.update_player(player_id, body.model_dump(exclude_unset=True)), start_time)

    @private.delete("/{player_id}", response_model=APIResponse)
    async def delete_player(player_id: str):
        start_time = time.time()
        await service.delete_player(player_id)
        return ok({"deleted": True}, start_time)

    return public, private
