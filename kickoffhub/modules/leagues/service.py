import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError

from ...common.cache import RedisCache
from ...common.parsing import (
    escape_like,
    parse_positive_int,
    parse_search_limit,
    require_keyword,
)
from ...core.exceptions import ConflictException, NotFoundException, ValidationException
from ...domain.models import LeagueOut, build_pagination, dump_many, dump_one
from .repository import LeagueRepository

LIST_CACHE_KEY = "leagues:list"
UPDATABLE_FIELDS = ("name", "type", "logo", "country_id")


def _validate_name(name: Any) -> str:
    trimmed = name.strip() if isinstance(name, str) else ""
    if not trimmed:
        raise ValidationException("League name is required", "LEAGUE_NAME_REQUIRED")
    return trimmed


class LeaguesService:
    def __init__(
        self, repository: LeagueRepository, cache: Optional[RedisCache] = None, cache_ttl: int = 600
    ):
        self.repository = repository
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.logger = logging.getLogger("leagues")

    async def list_leagues(self) -> list[dict[str, Any]]:
        if self.cache is not None:
            cached = await self.cache.get(LIST_CACHE_KEY)
            if cached is not None:
                return cached

        leagues = dump_many(LeagueOut, self.repository.all())
        if self.cache is not None:
            await self.cache.set(LIST_CACHE_KEY, leagues, self.cache_ttl)
        return leagues

    async def get_league(self, league_id: Any) -> dict[str, Any]:
        league_id = parse_positive_int(league_id, "id")
        league = self.repository.get(league_id)
        if league is None:
            raise NotFoundException("League not found", "LEAGUE_NOT_FOUND")
        return dump_one(LeagueOut, league)

    async def search_leagues(
        self, name: Any = None, limit: Any = None, page: Any = None
    ) -> dict[str, Any]:
        keyword = require_keyword(name)
        limit_number = parse_search_limit(limit)
        page_number = parse_positive_int(page, "page", 1)

        pattern = f"%{escape_like(keyword.lower())}%"
        rows, count = self.repository.search(
            pattern, (page_number - 1) * limit_number, limit_number
        )
        return {
            "results": dump_many(LeagueOut, rows),
            "pagination": build_pagination(count, page_number, limit_number),
            "keyword": keyword,
        }

    async def create_league(self, payload: dict[str, Any]) -> dict[str, Any]:
        values = {
            "id": parse_positive_int(payload.get("id"), "id"),
            "name": _validate_name(payload.get("name")),
            "type": payload.get("type"),
            "logo": payload.get("logo"),
            "country_id": payload.get("country_id"),
        }
        try:
            league = self.repository.create(values)
        except IntegrityError as e:
            self.logger.info(f"Rejected duplicate league {values['id']}: {e.orig}")
            raise ConflictException("League already exists", "LEAGUE_CONFLICT") from None

        await self._invalidate()
        self.logger.info(f"Created league {league.id} ({league.name})")
        return dump_one(LeagueOut, league)

    async def update_league(self, league_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        league_id = parse_positive_int(league_id, "id")
        updates = {k: payload[k] for k in UPDATABLE_FIELDS if k in payload}
        if "name" in updates:
            updates["name"] = _validate_name(updates["name"])
        if not updates:
            raise ValidationException("No fields to update", "LEAGUE_UPDATE_EMPTY")

        try:
            affected = self.repository.update(league_id, updates)
        except IntegrityError:
            raise ConflictException("League name already in use", "LEAGUE_CONFLICT") from None
        if not affected:
            raise NotFoundException("League not found", "LEAGUE_NOT_FOUND")

        await self._invalidate()
        return await self.get_league(league_id)

    async def delete_league(self, league_id: Any) -> None:
        league_id = parse_positive_int(league_id, "id")
        if not self.repository.delete(league_id):
            raise NotFoundException("League not found", "LEAGUE_NOT_FOUND")
        await self._invalidate()
        self.logger.info(f"Deleted league {league_id}")

    async def _invalidate(self):
        if self.cache is not None:
            await self.cache.delete_prefix("leagues:")
