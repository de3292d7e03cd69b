from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import selectinload

from ...database.manager import DatabaseManager
from ...database.schema import Player, PlayerTeamLeagueSeason

KEY_COLUMNS = ["player_id", "league_id", "team_id", "season"]


def _key_filter(key: dict[str, int]):
    return [getattr(PlayerTeamLeagueSeason, col) == key[col] for col in KEY_COLUMNS]


class PlayerTeamLeagueSeasonRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def player_exists(self, player_id: int) -> bool:
        with self.db.session_scope() as session:
            return session.get(Player, player_id) is not None

    def upsert(self, row: dict[str, int]) -> None:
        with self.db.session_scope() as session:
            self.db.upsert(session, PlayerTeamLeagueSeason, [row], KEY_COLUMNS)

    def get(self, key: dict[str, int]) -> Optional[PlayerTeamLeagueSeason]:
        with self.db.session_scope() as session:
            return session.scalars(select(PlayerTeamLeagueSeason).where(*_key_filter(key))).first()

    def update(self, key: dict[str, int], values: dict[str, Any]) -> int:
        with self.db.session_scope() as session:
            return session.execute(
                update(PlayerTeamLeagueSeason).where(*_key_filter(key)).values(**values)
            ).rowcount

    def delete(self, key: dict[str, int]) -> int:
        with self.db.session_scope() as session:
            return session.execute(delete(PlayerTeamLeagueSeason).where(*_key_filter(key))).rowcount

    def find_with_players(self, league_id: int, team_id: int, season: int) -> list[PlayerTeamLeagueSeason]:
        stmt = (
            select(PlayerTeamLeagueSeason)
            .join(PlayerTeamLeagueSeason.player)
            .options(selectinload(PlayerTeamLeagueSeason.player))
            .where(
                PlayerTeamLeagueSeason.league_id == league_id,
                PlayerTeamLeagueSeason.team_id == team_id,
                PlayerTeamLeagueSeason.season == season,
            )
            .order_by(Player.name.asc(), Player.id.asc())
        )
        with self.db.session_scope() as session:
            return list(session.scalars(stmt).all())
