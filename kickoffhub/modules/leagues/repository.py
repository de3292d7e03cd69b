from typing import Any

from sqlalchemy import delete, func, select, update

from ...database.manager import DatabaseManager
from ...database.schema import League


class LeagueRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def all(self) -> list[League]:
        with self.db.session_scope() as session:
            return list(session.scalars(select(League).order_by(League.name.asc())).all())

    def get(self, league_id: int) -> League | None:
        with self.db.session_scope() as session:
            return session.get(League, league_id)

    def search(self, pattern: str, offset: int, limit: int) -> tuple[list[League], int]:
        condition = func.lower(League.name).like(pattern, escape="\\")
        with self.db.session_scope() as session:
            total = session.scalar(select(func.count()).select_from(League).where(condition))
            rows = session.scalars(
                select(League).where(condition).order_by(League.name.asc()).offset(offset).limit(limit)
            ).all()
            return list(rows), total or 0

    def create(self, values: dict[str, Any]) -> League:
        with self.db.session_scope() as session:
            league = League(**values)
            session.add(league)
            session.flush()
            session.refresh(league)
            return league

    def update(self, league_id: int, values: dict[str, Any]) -> int:
        with self.db.session_scope() as session:
            result = session.execute(update(League).where(League.id == league_id).values(**values))
            return result.rowcount

    def delete(self, league_id: int) -> int:
        with self.db.session_scope() as session:
            result = session.execute(delete(League).where(League.id == league_id))
            return result.rowcount
