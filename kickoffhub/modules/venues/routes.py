import time

from fastapi import APIRouter, status

from ...api.models import (
    APIResponse,
    VenueCreateRequest,
    VenueImportRequest,
    VenueUpdateRequest,
    ok,
)
from .service import VenuesService


def create_routers(service: VenuesService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter(prefix="/venues")
    private = APIRouter(prefix="/venues")

    @public.get("", response_model=APIResponse)
    async def list_venues():
        start_time = time.time()
        return ok(await service.list_venues(), start_time)

    @public.get("/{venue_id}", response_model=APIResponse)
    async def get_venue(venue_id: str):
        start_time = time.time()
        return ok(await service.get_venue(venue_id), start_time)

    @private.post("/import", response_model=APIResponse)
    async def import_venue(body: VenueImportRequest):
        """Import one venue from API-Football by its provider id"""
        start_time = time.time()
        return ok(await service.import_venue(body.id), start_time)

    @private.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
    async def create_venue(body: VenueCreateRequest):
        start_time = time.time()
        return ok(await service.create_venue(body.model_dump(exclude_unset=True)), start_time)

    @private.put("/{venue_id}", response_model=APIResponse)
    async def update_venue(venue_id: str, body: VenueUpdateRequest):
        start_time = time.time()
        return ok(await service.update_venue(venue_id, body.model_dump(exclude_unset=True)), start_time)

    @private.delete("/{venue_id}", response_model=APIResponse)
    async def delete_venue(venue_id: str):
        start_time = time.time()
        await service.delete_venue(venue_id)
        return ok({"deleted": True}, start_time)

    return public, private
