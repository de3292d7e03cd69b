"""
API Models
Pydantic Models für API Requests und Responses
"""

import time
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """Standard API Response Model"""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    code: Optional[str] = None
    details: Optional[Any] = None
    execution_time_ms: Optional[float] = None
    timestamp: datetime = Field(default_factory=datetime.now)


def ok(data: Any, start_time: float) -> APIResponse:
    return APIResponse(
        success=True, data=data, execution_time_ms=(time.time() - start_time) * 1000
    )


class LeagueCreateRequest(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    type: Optional[str] = None
    logo: Optional[str] = None
    country_id: Optional[int] = None


class LeagueUpdateRequest(BaseModel):
    """Nur gesetzte Felder werden übernommen"""

    name: Optional[str] = None
    type: Optional[str] = None
    logo: Optional[str] = None
    country_id: Optional[int] = None


class SeasonCreateRequest(BaseModel):
    season: Optional[int] = None


class TeamCreateRequest(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    code: Optional[str] = None
    country: Optional[str] = None
    founded: Optional[int] = None
    national: Optional[bool] = False
    logo: Optional[str] = None
    venue_id: Optional[int] = None
    is_popular: Optional[bool] = False


class TeamUpdateRequest(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    country: Optional[str] = None
    founded: Optional[int] = None
    national: Optional[bool] = None
    logo: Optional[str] = None
    venue_id: Optional[int] = None
    is_popular: Optional[bool] = None


class TeamImportRequest(BaseModel):
    """Request model for API-Football team imports"""

    league: Optional[int] = None
    season: Optional[int] = None
    background: bool = False


class VenueCreateRequest(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    capacity: Optional[int] = None
    surface: Optional[str] = None
    image: Optional[str] = None


class VenueUpdateRequest(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    capacity: Optional[int] = None
    surface: Optional[str] = None
    image: Optional[str] = None


class VenueImportRequest(BaseModel):
    id: Optional[int] = None


class PlayerCreateRequest(BaseModel):
    id: Optional[int] = None
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
    is_popular: Optional[bool] = False


class PlayerUpdateRequest(BaseModel):
    """Nur gesetzte Felder werden übernommen"""

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
    is_popular: Optional[bool] = None


class PlayerImportRequest(BaseModel):
    """Request model for API-Football squad imports (one page of /players)"""

    league: Optional[int] = None
    team: Optional[int] = None
    season: Optional[int] = None
    page: Optional[int] = None


class PlayerMappingRequest(BaseModel):
    player_id: Optional[int] = None
    league_id: Optional[int] = None
    team_id: Optional[int] = None
    season: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response model"""

    status: str
    timestamp: datetime
    modules: Optional[list[str]] = None
