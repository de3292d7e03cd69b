from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, select, update

from ...database.manager import DatabaseManager
from ...database.schema import Venue

VENUE_UPSERT_COLUMNS = ("name", "address", "city", "capacity", "surface", "image", "updated_at")


class VenueRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def all(self) -> list[Venue]:
        with self.db.session_scope() as session:
            return list(session.scalars(select(Venue).order_by(Venue.id.asc())).all())

    def get(self, venue_id: int) -> Optional[Venue]:
        with self.db.session_scope() as session:
            return session.get(Venue, venue_id)

    def create(self, values: dict[str, Any]) -> Venue:
        with self.db.session_scope() as session:
            venue = Venue(**values)
            session.add(venue)
            session.flush()
            session.refresh(venue)
            return venue

    def update(self, venue_id: int, values: dict[str, Any]) -> int:
        with self.db.session_scope() as session:
            return session.execute(update(Venue).where(Venue.id == venue_id).values(**values)).rowcount

    def delete(self, venue_id: int) -> int:
        with self.db.session_scope() as session:
            return session.execute(delete(Venue).where(Venue.id == venue_id)).rowcount

    def bulk_upsert(self, rows: list[dict[str, Any]]) -> int:
        now = datetime.now()
        rows = [{**row, "updated_at": now} for row in rows]
        with self.db.session_scope() as session:
            return self.db.upsert(session, Venue, rows, ["id"], VENUE_UPSERT_COLUMNS)
