import time

from fastapi import APIRouter, Response, status

from ...api.models import APIResponse, SeasonCreateRequest, ok
from .service import SeasonsService


def create_routers(service: SeasonsService) -> tuple[APIRouter, APIRouter]:
    public = APIRouter()
    private = APIRouter()

    @public.get("/seasons", response_model=APIResponse)
    async def list_seasons():
        start_time = time.time()
        return ok(await service.list_seasons(), start_time)

    @private.post("/seasons", response_model=APIResponse)
    async def create_season(body: SeasonCreateRequest, response: Response):
        start_time = time.time()
        result = await service.create_season(body.season)
        response.status_code = status.HTTP_201_CREATED if result["created"] else status.HTTP_200_OK
        return ok(result, start_time)

    @private.delete("/seasons/{season}", response_model=APIResponse)
    async def delete_season(season: str):
        start_time = time.time()
        await service.delete_season(season)
        return ok({"deleted": True}, start_time)

    return public, private
