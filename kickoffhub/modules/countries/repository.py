from sqlalchemy import func, select

from ...database.manager import DatabaseManager
from ...database.schema import Country


class CountryRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def paginate(self, offset: int, limit: int) -> tuple[list[Country], int]:
        with self.db.session_scope() as session:
            total = session.scalar(select(func.count()).select_from(Country))
            rows = session.scalars(
                select(Country).order_by(Country.name.asc()).offset(offset).limit(limit)
            ).all()
            return list(rows), total or 0

    def search(self, pattern: str, offset: int, limit: int) -> tuple[list[Country], int]:
        condition = func.lower(Country.name).like(pattern, escape="\\")
        with self.db.session_scope() as session:
            total = session.scalar(select(func.count()).select_from(Country).where(condition))
            rows = session.scalars(
                select(Country)
                .where(condition)
                .order_by(Country.name.asc())
                .offset(offset)
                .limit(limit)
            ).all()
            return list(rows), total or 0

    def get(self, country_id: int) -> Country | None:
        with self.db.session_scope() as session:
            return session.get(Country, country_id)
