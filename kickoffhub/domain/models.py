from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from ..common.parsing import total_pages

# Typed data transfer objects shared by services, routes and the import worker


class _OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CountryOut(_OrmModel):
    id: int
    name: str
    code: Optional[str] = None
    flag: Optional[str] = None


class LeagueOut(_OrmModel):
    id: int
    name: str
    type: Optional[str] = None
    logo: Optional[str] = None
    country_id: Optional[int] = None


class SeasonOut(_OrmModel):
    season: int


class TeamOut(_OrmModel):
    id: int
    name: str
    code: Optional[str] = None
    country: Optional[str] = None
    founded: Optional[int] = None
    national: Optional[bool] = False
    logo: Optional[str] = None
    venue_id: Optional[int] = None
    is_popular: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LeagueTeamSeasonOut(_OrmModel):
    league_id: int
    team_id: int
    season: int


class VenueOut(_OrmModel):
    id: int
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    capacity: Optional[int] = None
    surface: Optional[str] = None
    image: Optional[str] = None


class PlayerOut(_OrmModel):
    id: int
    name: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    age: Optional[int] = None
    birth_date: Optional[date] = None
    birth_place: Optional[str] = None
    birth_country: Optional[str] = None
    nationality: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    number: Optional[int] = None
    position: Optional[str] = None
    photo: Optional[str] = None
    is_popular: bool = False


class PlayerTeamLeagueSeasonOut(_OrmModel):
    player_id: int
    league_id: int
    team_id: int
    season: int


class Pagination(BaseModel):
    total_items: int
    total_pages: int
    page: int
    limit: int
    has_next_page: Optional[bool] = None
    has_prev_page: Optional[bool] = None


class ImportJobPayload(BaseModel):
    """Payload eines ``teams-import`` Jobs (JSON über den Broker)"""

    league_id: PositiveInt
    season: PositiveInt


class MappingError(BaseModel):
    team_id: int
    reason: str


class ImportSummary(BaseModel):
    imported: int = 0
    mappings_inserted: int = 0
    mapping_errors: list[MappingError] = Field(default_factory=list)
    league: int
    season: int
    total_pages: Optional[int] = None
    message: Optional[str] = None


class PlayerMappingError(BaseModel):
    player_id: int
    reason: str


class PlayerImportSummary(BaseModel):
    imported: int = 0
    mappings_inserted: int = 0
    mapping_errors: list[PlayerMappingError] = Field(default_factory=list)
    league: int
    team: int
    season: int
    page: int = 1
    total_pages: Optional[int] = None
    message: Optional[str] = None


def dump_many(model: type[BaseModel], rows) -> list[dict[str, Any]]:
    return [model.model_validate(row).model_dump(mode="json") for row in rows]


def dump_one(model: type[BaseModel], row) -> dict[str, Any]:
    return model.model_validate(row).model_dump(mode="json")


def build_pagination(total_items: int, page: int, limit: int, *, with_links: bool = False) -> dict[str, Any]:
    """Paginierungsblock; ``with_links`` ergänzt has_next_page/has_prev_page"""
    pages = total_pages(total_items, limit)
    meta = Pagination(total_items=total_items, total_pages=pages, page=page, limit=limit)
    if with_links:
        meta.has_next_page = page < pages
        meta.has_prev_page = page > 1
    return meta.model_dump(exclude_none=True)
