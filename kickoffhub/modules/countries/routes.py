"""
Countries API Endpoints
"""

import time
from typing import Optional

from fastapi import APIRouter

from ...api.models import APIResponse, ok
from .service import CountriesService


def create_router(service: CountriesService) -> APIRouter:
    router = APIRouter()

    @router.get("/countries", response_model=APIResponse)
    async def list_countries(page: Optional[str] = None, limit: Optional[str] = None):
        """Paginated list of countries ordered by name"""
        start_time = time.time()
        return ok(await service.list_countries(page, limit), start_time)

    @router.get("/countries/search", response_model=APIResponse)
    async def search_countries(
        name: Optional[str] = None, limit: Optional[str] = None, page: Optional[str] = None
    ):
        """Case-insensitive substring search on the country name"""
        start_time = time.time()
        return ok(await service.search_countries(name, limit, page), start_time)

    @router.get("/countries/{country_id}", response_model=APIResponse)
    async def get_country(country_id: str):
        start_time = time.time()
        return ok(await service.get_country(country_id), start_time)

    return router
