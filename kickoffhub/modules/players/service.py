"""
Players Service
Spieler: Listen, Suche, CRUD, Statistiken und Kader-Import aus API-Football.

Der Import speichert Spieler per Upsert und legt danach je Spieler eine
Zuordnung Spieler/Liga/Team/Saison an; Fehler einzelner Zuordnungen werden
gesammelt statt geworfen.
"""

import logging
import time
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...common.parsing import (
    MAX_SEARCH_LIMIT,
    clean_text,
    escape_like,
    parse_pagination,
    parse_positive_int,
    parse_search_limit,
    require_keyword,
)
from ...core.exceptions import AppException, ConflictException, NotFoundException, ValidationException
from ...domain.models import (
    CountryOut,
    PlayerImportSummary,
    PlayerMappingError,
    PlayerOut,
    build_pagination,
    dump_many,
    dump_one,
)
from ...monitoring.prometheus_metrics import PrometheusMetrics
from ..api_football.client import ApiFootballClient
from ..player_team_league_season.service import PlayerTeamLeagueSeasonService
from .repository import PlayerRepository

PLAYERS_IMPORT_JOB = "players-import"
TEXT_FIELDS = (
    "name",
    "firstname",
    "lastname",
    "birth_place",
    "birth_country",
    "nationality",
    "height",
    "weight",
    "position",
    "photo",
)
POSITIVE_INT_FIELDS = ("age", "number")


def _api_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _api_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def build_player_row(entry: Any) -> Optional[dict[str, Any]]:
    """Baut eine ``players`` Zeile aus einem API-Football ``/players`` Eintrag.

    Trikotnummer und Position fallen auf die erste ``statistics[].games``
    zurück. Einträge ohne ganzzahlige ID oder ohne Namen werden verworfen.
    """
    if not isinstance(entry, dict) or not isinstance(entry.get("player"), dict):
        return None
    player = entry["player"]
    player_id = player.get("id")
    if not isinstance(player_id, int) or isinstance(player_id, bool) or player_id <= 0:
        return None
    name = clean_text(player.get("name"))
    if not name:
        return None

    stats = entry.get("statistics")
    games = {}
    if isinstance(stats, list) and stats and isinstance(stats[0], dict):
        games = stats[0].get("games") or {}
    birth = player.get("birth") if isinstance(player.get("birth"), dict) else {}
    number = player.get("number")
    return {
        "id": player_id,
        "name": name,
        "firstname": clean_text(player.get("firstname")),
        "lastname": clean_text(player.get("lastname")),
        "age": _api_int(player.get("age")),
        "birth_date": _api_date(birth.get("date")),
        "birth_place": clean_text(birth.get("place")),
        "birth_country": clean_text(birth.get("country")),
        "nationality": clean_text(player.get("nationality")),
        "height": clean_text(player.get("height")),
        "weight": clean_text(player.get("weight")),
        "number": _api_int(number if number is not None else games.get("number")),
        "position": clean_text(player.get("position") or games.get("position")),
        "photo": clean_text(player.get("photo")),
    }


class PlayersService:
    def __init__(
        self,
        repository: PlayerRepository,
        api_client: ApiFootballClient,
        memberships: PlayerTeamLeagueSeasonService,
        metrics: Optional[PrometheusMetrics] = None,
    ):
        self.repository = repository
        self.api_client = api_client
        self.memberships = memberships
        self.metrics = metrics
        self.logger = logging.getLogger("players")

    def _build_values(self, payload: dict[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {k: clean_text(payload[k]) for k in TEXT_FIELDS if k in payload}
        for field in POSITIVE_INT_FIELDS:
            if field in payload:
                values[field] = None if payload[field] is None else parse_positive_int(payload[field], field)
        if "birth_date" in payload:
            values["birth_date"] = payload["birth_date"]
        if "is_popular" in payload:
            if payload["is_popular"] is None:
                raise ValidationException("is_popular must not be null", "INVALID_PLAYER_FIELD")
            values["is_popular"] = bool(payload["is_popular"])
        return values

    # --- Lesen ---------------------------------------------------------------

    async def list_players(
        self,
        page: Any = None,
        limit: Any = None,
        nationality: Optional[str] = None,
        popular_only: bool = False,
    ) -> dict[str, Any]:
        page_number, limit_number = parse_pagination(page, limit)
        if limit_number > MAX_SEARCH_LIMIT:
            raise ValidationException(f"Limit cannot exceed {MAX_SEARCH_LIMIT}", "LIMIT_TOO_LARGE")

        rows, count = self.repository.paginate(
            (page_number - 1) * limit_number,
            limit_number,
            nationality=clean_text(nationality),
            popular_only=popular_only,
        )
        return {
            "data": dump_many(PlayerOut, rows),
            "pagination": build_pagination(count, page_number, limit_number),
        }

    async def count_players(self) -> dict[str, int]:
        return {"total": self.repository.count()}

    async def search_players(self, name: Any = None, limit: Any = None) -> dict[str, Any]:
        keyword = require_keyword(name)
        limit_number = parse_search_limit(limit)
        players = self.repository.search(f"%{escape_like(keyword.lower())}%", limit_number)
        return {
            "results": dump_many(PlayerOut, players),
            "total": len(players),
            "limit": limit_number,
            "keyword": keyword,
        }

    async def get_player(self, player_id: Any) -> dict[str, Any]:
        """Spieler inkl. Land, aufgelöst über die Nationalität"""
        player_id = parse_positive_int(player_id, "player_id")
        player = self.repository.get(player_id)
        if player is None:
            raise NotFoundException("Player not found", "PLAYER_NOT_FOUND")
        country = self.repository.country_by_name(player.nationality) if player.nationality else None
        return {
            **dump_one(PlayerOut, player),
            "country": dump_one(CountryOut, country) if country is not None else None,
        }

    # --- Schreiben -----------------------------------------------------------

    async def create_player(self, payload: dict[str, Any]) -> dict[str, Any]:
        player_id = parse_positive_int(payload.get("id"), "id")
        values = self._build_values(payload)
        if not values.get("name"):
            raise ValidationException("Player name is required", "INVALID_PLAYER_NAME")

        try:
            player = self.repository.create({"id": player_id, **values})
        except IntegrityError:
            raise ConflictException("Player already exists", "PLAYER_CONFLICT") from None
        self.logger.info(f"Created player {player.id} ({player.name})")
        return dump_one(PlayerOut, player)

    async def update_player(self, player_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        player_id = parse_positive_int(player_id, "player_id")
        updates = self._build_values(payload)
        if "name" in updates and not updates["name"]:
            raise ValidationException("Player name is required", "INVALID_PLAYER_NAME")
        if not updates:
            raise ValidationException("No fields to update", "PLAYER_UPDATE_EMPTY")

        if not self.repository.update(player_id, updates):
            raise NotFoundException("Player not found", "PLAYER_NOT_FOUND")
        return dump_one(PlayerOut, self.repository.get(player_id))

    async def delete_player(self, player_id: Any) -> None:
        player_id = parse_positive_int(player_id, "player_id")
        if not self.repository.delete(player_id):
            raise NotFoundException("Player not found", "PLAYER_NOT_FOUND")
        self.logger.info(f"Deleted player {player_id}")

    # --- API-Football --------------------------------------------------------

    async def get_player_statistics(
        self, player_id: Any, season: Any = None, league: Any = None, team: Any = None
    ) -> dict[str, Any]:
        params = {"id": parse_positive_int(player_id, "player_id")}
        for field, value in (("season", season), ("league", league), ("team", team)):
            if value is not None and str(value).strip():
                params[field] = parse_positive_int(value, field)

        data = await self.api_client.get("/players", params)
        return {**params, "source": "API-Football", "payload": data}

    async def import_players(
        self, league: Any, team: Any, season: Any, page: Any = None
    ) -> dict[str, Any]:
        """Importiert eine Seite des Kaders eines Teams (idempotent)"""
        league_id = parse_positive_int(league, "league")
        team_id = parse_positive_int(team, "team")
        season = parse_positive_int(season, "season")
        page_number = parse_positive_int(page, "page", 1)
        start = time.time()
        status = "error"

        try:
            data = await self.api_client.get(
                "/players",
                {"league": league_id, "team": team_id, "season": season, "page": page_number},
            )
            paging = data.get("paging") if isinstance(data, dict) else None
            entries = data.get("response") if isinstance(data, dict) else None
            entries = entries if isinstance(entries, list) else []

            summary = PlayerImportSummary(
                league=league_id,
                team=team_id,
                season=season,
                page=page_number,
                total_pages=paging.get("total") if isinstance(paging, dict) else None,
            )
            rows_by_id = {row["id"]: row for row in map(build_player_row, entries) if row is not None}
            if not rows_by_id:
                summary.message = "No players found" if not entries else "No valid players to store"
                status = "empty"
                return summary.model_dump()

            self.repository.bulk_upsert(list(rows_by_id.values()))
            summary.imported = len(rows_by_id)

            for player_id in rows_by_id:
                try:
                    await self.memberships.create_mapping(
                        {"player_id": player_id, "league_id": league_id, "team_id": team_id, "season": season}
                    )
                    summary.mappings_inserted += 1
                except (AppException, SQLAlchemyError) as e:
                    self.logger.warning(f"Mapping player={player_id} team={team_id} failed: {e}")
                    summary.mapping_errors.append(PlayerMappingError(player_id=player_id, reason=str(e)))

            status = "success"
            self.logger.info(
                f"Imported {summary.imported} players for league={league_id} team={team_id} "
                f"season={season} page={page_number}"
            )
            return summary.model_dump()
        finally:
            if self.metrics:
                self.metrics.record_import(PLAYERS_IMPORT_JOB, "sync", status, time.time() - start)
