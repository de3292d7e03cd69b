from typing import Any, Optional

from sqlalchemy import delete, func, select, update

from ...database.manager import DatabaseManager
from ...database.schema import Country, Player, PlayerTeamLeagueSeason

# is_popular wird redaktionell gepflegt und vom Import nicht überschrieben
PLAYER_UPSERT_COLUMNS = (
    "name",
    "firstname",
    "lastname",
    "age",
    "birth_date",
    "birth_place",
    "birth_country",
    "nationality",
    "height",
    "weight",
    "number",
    "position",
    "photo",
)


class PlayerRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def paginate(
        self,
        offset: int,
        limit: int,
        nationality: Optional[str] = None,
        popular_only: bool = False,
    ) -> tuple[list[Player], int]:
        conditions = []
        if nationality:
            conditions.append(func.lower(Player.nationality) == nationality.lower())
        if popular_only:
            conditions.append(Player.is_popular.is_(True))

        count_stmt = select(func.count()).select_from(Player).where(*conditions)
        stmt = (
            select(Player)
            .where(*conditions)
            .order_by(Player.name.asc(), Player.id.asc())
            .offset(offset)
            .limit(limit)
        )
        with self.db.session_scope() as session:
            return list(session.scalars(stmt).all()), session.scalar(count_stmt) or 0

    def count(self) -> int:
        with self.db.session_scope() as session:
            return session.scalar(select(func.count()).select_from(Player)) or 0

    def get(self, player_id: int) -> Optional[Player]:
        with self.db.session_scope() as session:
            return session.get(Player, player_id)

    def search(self, pattern: str, limit: int) -> list[Player]:
        with self.db.session_scope() as session:
            return list(
                session.scalars(
                    select(Player)
                    .where(func.lower(Player.name).like(pattern, escape="\\"))
                    .order_by(Player.name.asc())
                    .limit(limit)
                ).all()
            )

    def country_by_name(self, name: str) -> Optional[Country]:
        with self.db.session_scope() as session:
            return session.scalars(
                select(Country).where(func.lower(Country.name) == name.strip().lower())
            ).first()

    def create(self, values: dict[str, Any]) -> Player:
        with self.db.session_scope() as session:
            player = Player(**values)
            session.add(player)
            session.flush()
            session.refresh(player)
            return player

    def update(self, player_id: int, values: dict[str, Any]) -> int:
        with self.db.session_scope() as session:
            return session.execute(update(Player).where(Player.id == player_id).values(**values)).rowcount

    def delete(self, player_id: int) -> int:
        with self.db.session_scope() as session:
            session.execute(
                delete(PlayerTeamLeagueSeason).where(PlayerTeamLeagueSeason.player_id == player_id)
            )
            return session.execute(delete(Player).where(Player.id == player_id)).rowcount

    def bulk_upsert(self, rows: list[dict[str, Any]]) -> int:
        with self.db.session_scope() as session:
            return self.db.upsert(session, Player, rows, ["id"], PLAYER_UPSERT_COLUMNS)
