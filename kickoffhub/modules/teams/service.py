"""
Teams Service
CRUD, Suche und der Import von Teams aus API-Football (synchron oder über die Queue)
"""

import asyncio
import logging
import re
import time
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...common.parsing import (
    clean_text,
    escape_like,
    parse_pagination,
    parse_positive_int,
    parse_search_limit,
    require_keyword,
)
from ...core.exceptions import ConflictException, NotFoundException, ValidationException
from ...domain.models import (
    ImportSummary,
    MappingError,
    TeamOut,
    build_pagination,
    dump_many,
    dump_one,
)
from ...monitoring.prometheus_metrics import PrometheusMetrics
from ..api_football.client import ApiFootballClient
from .queue import TEAMS_IMPORT_JOB, TeamImportQueue
from .repository import TeamRepository

UPDATABLE_FIELDS = ("name", "code", "country", "founded", "national", "logo", "venue_id", "is_popular")
NON_NULLABLE_FIELDS = ("national", "is_popular")


def _parse_api_int(value: Any) -> Optional[int]:
    """Ganzzahl aus Provider-Daten; Präfix-Parsing wie ``"1878abc"`` -> 1878"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    match = re.match(r"\s*([+-]?\d+)", str(value))
    return int(match.group(1)) if match else None


def build_team_row(entry: Any) -> Optional[dict[str, Any]]:
    """Baut eine ``teams`` Zeile aus einem API-Football ``response[]`` Eintrag.

    Einträge ohne positive ID oder ohne Namen werden verworfen (``None``).
    """
    if not isinstance(entry, dict):
        return None
    team = entry.get("team")
    if not isinstance(team, dict):
        return None

    team_id = _parse_api_int(team.get("id"))
    if not team_id or team_id <= 0:
        return None
    name = clean_text(team.get("name"))
    if not name:
        return None

    venue = entry.get("venue") if isinstance(entry.get("venue"), dict) else {}
    return {
        "id": team_id,
        "name": name,
        "code": clean_text(team.get("code")),
        "country": clean_text(team.get("country")),
        "founded": _parse_api_int(team.get("founded")),
        "national": bool(team.get("national")),
        "logo": clean_text(team.get("logo")),
        "venue_id": _parse_api_int(venue.get("id")),
    }


class TeamsService:
    def __init__(
        self,
        repository: TeamRepository,
        api_client: ApiFootballClient,
        queue: Optional[TeamImportQueue] = None,
        metrics: Optional[PrometheusMetrics] = None,
    ):
        self.repository = repository
        self.api_client = api_client
        self.queue = queue
        self.metrics = metrics
        self.logger = logging.getLogger("teams")

    # --- Lesen ---------------------------------------------------------------

    async def list_teams(self, page: Any = None, limit: Any = None, popular_only: bool = False):
        page_number, limit_number = parse_pagination(page, limit)
        rows, count = self.repository.paginate(
            (page_number - 1) * limit_number, limit_number, popular_only=popular_only
        )
        return {
            "data": dump_many(TeamOut, rows),
            "pagination": build_pagination(count, page_number, limit_number),
        }

    async def get_team(self, team_id: Any) -> dict[str, Any]:
        team_id = parse_positive_int(team_id, "team_id")
        team = self.repository.get(team_id)
        if team is None:
            raise NotFoundException("Team not found", "TEAM_NOT_FOUND")
        return dump_one(TeamOut, team)

    async def get_teams_by_league(self, league_id: Any, season: Any = None) -> list[dict[str, Any]]:
        league_id = parse_positive_int(league_id, "league_id")
        season_value = None
        if season is not None and str(season).strip():
            season_value = parse_positive_int(season, "season")

        team_ids = self.repository.find_mapped_team_ids(league_id, season_value)
        if not team_ids:
            raise NotFoundException("No teams mapped to this league", "NO_LEAGUE_MAPPINGS")
        teams = self.repository.get_many(team_ids)
        if not teams:
            raise NotFoundException("No teams stored for this league", "NO_TEAMS_FOR_LEAGUE")
        return dump_many(TeamOut, teams)

    async def search_teams(self, name: Any = None, limit: Any = None) -> dict[str, Any]:
        keyword = require_keyword(name)
        limit_number = parse_search_limit(limit)
        teams = self.repository.search(f"%{escape_like(keyword.lower())}%", limit_number)
        return {
            "results": dump_many(TeamOut, teams),
            "total": len(teams),
            "limit": limit_number,
            "keyword": keyword,
        }

    # --- Schreiben -----------------------------------------------------------

    async def create_team(self, payload: dict[str, Any]) -> dict[str, Any]:
        # Team-IDs kommen vom Provider, es gibt keine Sequenz
        team_id = parse_positive_int(payload.get("id"), "id")
        name = clean_text(payload.get("name"))
        if not name:
            raise ValidationException("Team name is required", "INVALID_TEAM_NAME")

        values = {
            "id": team_id,
            "name": name,
            "code": payload.get("code"),
            "country": payload.get("country"),
            "founded": payload.get("founded"),
            "national": bool(payload.get("national") or False),
            "logo": payload.get("logo"),
            "venue_id": payload.get("venue_id"),
            "is_popular": bool(payload.get("is_popular") or False),
        }

        try:
            team = self.repository.create(values)
        except IntegrityError:
            raise ConflictException("Team already exists", "TEAM_CONFLICT") from None
        self.logger.info(f"Created team {team.id} ({team.name})")
        return dump_one(TeamOut, team)

    async def update_team(self, team_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        team_id = parse_positive_int(team_id, "team_id")
        updates = {k: payload[k] for k in UPDATABLE_FIELDS if k in payload}
        if "name" in updates:
            updates["name"] = clean_text(updates["name"])
            if not updates["name"]:
                raise ValidationException("Team name is required", "INVALID_TEAM_NAME")
        for field in NON_NULLABLE_FIELDS:
            if field in updates and updates[field] is None:
                raise ValidationException(f"{field} must not be null", "INVALID_TEAM_FIELD")
        if not updates:
            raise ValidationException("No fields to update", "TEAM_UPDATE_EMPTY")

        try:
            updated = self.repository.update(team_id, updates)
        except IntegrityError:
            raise ConflictException("Team update violates a constraint", "TEAM_CONFLICT") from None
        if not updated:
            raise NotFoundException("Team not found", "TEAM_NOT_FOUND")
        return await self.get_team(team_id)

    async def delete_team(self, team_id: Any) -> None:
        team_id = parse_positive_int(team_id, "team_id")
        if not self.repository.delete(team_id):
            raise NotFoundException("Team not found", "TEAM_NOT_FOUND")
        self.logger.info(f"Deleted team {team_id}")

    # --- API-Football --------------------------------------------------------

    async def get_team_statistics(self, team_id: Any, league_id: Any, season: Any) -> dict[str, Any]:
        """Proxy auf /teams/statistics; Provider-Fehler werden als 502/504 durchgereicht"""
        team_id = parse_positive_int(team_id, "team_id")
        league_id = parse_positive_int(league_id, "league")
        season = parse_positive_int(season, "season")

        data = await self.api_client.get(
            "/teams/statistics", {"league": league_id, "team": team_id, "season": season}
        )
        return {
            "league": league_id,
            "season": season,
            "team_id": team_id,
            "source": "API-Football",
            "payload": data,
        }

    async def import_teams(self, league: Any, season: Any, background: bool = False) -> dict[str, Any]:
        league_id = parse_positive_int(league, "league")
        season_value = parse_positive_int(season, "season")

        if background:
            job_id = None
            if self.queue is not None:
                # send_task blockiert bis der Broker bestätigt
                job_id = await asyncio.to_thread(
                    self.queue.enqueue, {"league_id": league_id, "season": season_value}
                )
            if job_id is not None:
                if self.metrics:
                    self.metrics.record_import(TEAMS_IMPORT_JOB, "queued", "enqueued", 0.0)
                return {
                    "queued": True,
                    "job_id": job_id,
                    "message": "Import job has been queued",
                    "league": league_id,
                    "season": season_value,
                }
            self.logger.warning(
                f"Import queue unavailable, importing league={league_id} season={season_value} synchronously"
            )
            summary = await self.perform_team_import(league_id, season_value)
            return {
                "queued": False,
                "note": "Background queue unavailable, import ran synchronously",
                **summary,
            }

        return await self.perform_team_import(league_id, season_value)

    async def perform_team_import(self, league_id: Any, season: Any) -> dict[str, Any]:
        """Importiert Teams einer Liga/Saison aus API-Football (idempotent).

        Teams werden per Upsert gespeichert, danach je Team eine Liga/Team/Saison
        Zuordnung. Fehler einzelner Zuordnungen landen in ``mapping_errors``.
        """
        league_id = parse_positive_int(league_id, "league_id")
        season = parse_positive_int(season, "season")
        start = time.time()
        status = "error"
        imported = 0

        try:
            data = await self.api_client.get("/teams", {"league": league_id, "season": season})
            paging = data.get("paging") if isinstance(data, dict) else None
            total = paging.get("total") if isinstance(paging, dict) else None
            entries = data.get("response") if isinstance(data, dict) else None
            entries = entries if isinstance(entries, list) else []

            summary = ImportSummary(league=league_id, season=season, total_pages=total)
            if not entries:
                summary.message = "API-Football returned no teams"
                status = "empty"
                return summary.model_dump()

            # letzte Version pro ID gewinnt; ein Upsert-Statement darf keine ID doppelt enthalten
            rows_by_id: dict[int, dict[str, Any]] = {}
            for entry in entries:
                row = build_team_row(entry)
                if row is not None:
                    rows_by_id[row["id"]] = row
            if not rows_by_id:
                summary.message = "No valid teams to store"
                status = "empty"
                return summary.model_dump()

            self.repository.bulk_upsert(list(rows_by_id.values()))
            imported = summary.imported = len(rows_by_id)

            for team_id in rows_by_id:
                try:
                    self.repository.upsert_mapping(league_id, team_id, season)
                    summary.mappings_inserted += 1
                except SQLAlchemyError as e:
                    self.logger.warning(
                        f"Mapping league={league_id} team={team_id} season={season} failed: {e}"
                    )
                    summary.mapping_errors.append(MappingError(team_id=team_id, reason=str(e)))

            status = "success"
            self.logger.info(
                f"Imported {summary.imported} teams for league={league_id} season={season} "
                f"({summary.mappings_inserted} mappings, {len(summary.mapping_errors)} errors)"
            )
            return summary.model_dump()
        finally:
            if self.metrics:
                self.metrics.record_import(
                    TEAMS_IMPORT_JOB, "sync", status, time.time() - start, teams=imported
                )
