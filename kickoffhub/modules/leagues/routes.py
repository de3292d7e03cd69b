"""
Leagues API Endpoints
Öffentliche Lese-Routen und private Schreib-Routen
"""

import time
from typing import Optional

from fastapi import APIRouter, status

from ...api.models import APIResponse, LeagueCreateRequest, LeagueUpdateRequest, ok
from .service import LeaguesService


def create_routers(service: LeaguesService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter()
    private = APIRouter()

    @public.get("/leagues", response_model=APIResponse)
    async def list_leagues():
        start_time = time.time()
        return ok(await service.list_leagues(), start_time)

    @public.get("/leagues/search", response_model=APIResponse)
    async def search_leagues(
        name: Optional[str] = None, limit: Optional[str] = None, page: Optional[str] = None
    ):
        start_time = time.time()
        return ok(await service.search_leagues(name, limit, page), start_time)

    @public.get("/leagues/{league_id}", response_model=APIResponse)
    async def get_league(league_id: str):
        start_time = time.time()
        return ok(await service.get_league(league_id), start_time)

    @private.post("/leagues", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
    async def create_league(body: LeagueCreateRequest):
        start_time = time.time()
        return ok(await service.create_league(body.model_dump()), start_time)

    @private.put("/leagues/{league_id}", response_model=APIResponse)
    async def update_league(league_id: str, body: LeagueUpdateRequest):
        """Partial update, only fields present in the body are written"""
        start_time = time.time()
        updates = body.model_dump(exclude_unset=True)
        return ok(await service.update_league(league_id, updates), start_time)

    @private.delete("/leagues/{league_id}", response_model=APIResponse)
    async def delete_league(league_id: str):
        start_time = time.time()
        await service.delete_league(league_id)
        return ok({"deleted": True}, start_time)

    return public, private
