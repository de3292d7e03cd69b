from sqlalchemy import delete, select

from ...database.manager import DatabaseManager
from ...database.schema import Season


class SeasonRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def list_ordered(self) -> list[Season]:
        with self.db.session_scope() as session:
            return list(session.scalars(select(Season).order_by(Season.season.desc())).all())

    def find_or_create(self, value: int) -> tuple[Season, bool]:
        with self.db.session_scope() as session:
            season = session.get(Season, value)
            if season is not None:
                return season, False
            season = Season(season=value)
            session.add(season)
            return season, True

    def delete(self, value: int) -> int:
        with self.db.session_scope() as session:
            return session.execute(delete(Season).where(Season.season == value)).rowcount
