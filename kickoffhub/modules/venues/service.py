"""
Venues Service
Stadien: CRUD und Import einzelner Venues aus API-Football
"""

import logging
import time
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError

from ...common.parsing import clean_text, parse_positive_int
from ...core.exceptions import ConflictException, NotFoundException, ValidationException
from ...domain.models import VenueOut, dump_many, dump_one
from ...monitoring.prometheus_metrics import PrometheusMetrics
from ..api_football.client import ApiFootballClient
from .repository import VenueRepository

VENUES_IMPORT_JOB = "venues-import"
TEXT_FIELDS = ("name", "address", "city", "surface", "image")


def _parse_capacity(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationException("capacity must be a non-negative integer", "INVALID_CAPACITY")
    try:
        capacity = int(str(value).strip())
    except ValueError:
        raise ValidationException("capacity must be a non-negative integer", "INVALID_CAPACITY") from None
    if capacity < 0:
        raise ValidationException("capacity must be a non-negative integer", "INVALID_CAPACITY")
    return capacity


def build_venue_row(venue: Any) -> Optional[dict[str, Any]]:
    """Baut eine ``venues`` Zeile aus einem API-Football ``/venues`` Eintrag"""
    if not isinstance(venue, dict):
        return None
    try:
        venue_id = int(str(venue.get("id")).strip())
    except ValueError:
        return None
    name = clean_text(venue.get("name"))
    if venue_id <= 0 or not name:
        return None
    capacity = venue.get("capacity")
    return {
        "id": venue_id,
        "name": name,
        "address": clean_text(venue.get("address")),
        "city": clean_text(venue.get("city")),
        "capacity": capacity if isinstance(capacity, int) and not isinstance(capacity, bool) else None,
        "surface": clean_text(venue.get("surface")),
        "image": clean_text(venue.get("image")),
    }


class VenuesService:
    def __init__(
        self,
        repository: VenueRepository,
        api_client: ApiFootballClient,
        metrics: Optional[PrometheusMetrics] = None,
    ):
        self.repository = repository
        self.api_client = api_client
        self.metrics = metrics
        self.logger = logging.getLogger("venues")

    def _normalize(self, payload: dict[str, Any]) -> dict[str, Any]:
        values = {k: clean_text(payload[k]) for k in TEXT_FIELDS if k in payload}
        if "capacity" in payload:
            values["capacity"] = _parse_capacity(payload["capacity"])
        return values

    async def list_venues(self) -> list[dict[str, Any]]:
        return dump_many(VenueOut, self.repository.all())

    async def get_venue(self, venue_id: Any) -> dict[str, Any]:
        venue_id = parse_positive_int(venue_id, "venue_id")
        venue = self.repository.get(venue_id)
        if venue is None:
            raise NotFoundException("Venue not found", "VENUE_NOT_FOUND")
        return dump_one(VenueOut, venue)

    async def create_venue(self, payload: dict[str, Any]) -> dict[str, Any]:
        venue_id = parse_positive_int(payload.get("id"), "id")
        values = self._normalize(payload)
        if not values.get("name"):
            raise ValidationException("Venue name is required", "INVALID_VENUE_NAME")

        try:
            venue = self.repository.create({"id": venue_id, **values})
        except IntegrityError:
            raise ConflictException("Venue already exists", "VENUE_CONFLICT") from None
        self.logger.info(f"Created venue {venue.id} ({venue.name})")
        return dump_one(VenueOut, venue)

    async def update_venue(self, venue_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        venue_id = parse_positive_int(venue_id, "venue_id")
        updates = self._normalize(payload)
        if "name" in updates and not updates["name"]:
            raise ValidationException("Venue name is required", "INVALID_VENUE_NAME")
        if not updates:
            raise ValidationException("No fields to update", "VENUE_UPDATE_EMPTY")

        if not self.repository.update(venue_id, updates):
            raise NotFoundException("Venue not found", "VENUE_NOT_FOUND")
        return await self.get_venue(venue_id)

    async def delete_venue(self, venue_id: Any) -> None:
        venue_id = parse_positive_int(venue_id, "venue_id")
        if not self.repository.delete(venue_id):
            raise NotFoundException("Venue not found", "VENUE_NOT_FOUND")
        self.logger.info(f"Deleted venue {venue_id}")

    async def import_venue(self, venue_id: Any) -> dict[str, Any]:
        """Holt eine Venue per ID aus API-Football und speichert sie per Upsert"""
        venue_id = parse_positive_int(venue_id, "id")
        start = time.time()
        status = "error"
        try:
            data = await self.api_client.get("/venues", {"id": venue_id})
            entries = data.get("response") if isinstance(data, dict) else None
            if not isinstance(entries, list) or not entries:
                status = "empty"
                return {"imported": 0, "message": "API-Football returned no venues"}

            rows = {row["id"]: row for row in map(build_venue_row, entries) if row is not None}
            if not rows:
                status = "empty"
                return {"imported": 0, "message": "No valid venues to store"}

            self.repository.bulk_upsert(list(rows.values()))
            status = "success"
            self.logger.info(f"Imported {len(rows)} venue(s) for id={venue_id}")
            return {"imported": len(rows), "id": venue_id}
        finally:
            if self.metrics:
                self.metrics.record_import(VENUES_IMPORT_JOB, "sync", status, time.time() - start)
