from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, func, select, update

from ...database.manager import DatabaseManager
from ...database.schema import LeagueTeamSeason, Team

# Spalten, die ein erneuter Import überschreibt (is_popular bleibt redaktionell gepflegt)
TEAM_UPSERT_COLUMNS = ("name", "code", "country", "founded", "national", "logo", "venue_id", "updated_at")


class TeamRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def paginate(self, offset: int, limit: int, popular_only: bool = False) -> tuple[list[Team], int]:
        count_stmt = select(func.count()).select_from(Team)
        stmt = select(Team).order_by(Team.name.asc()).offset(offset).limit(limit)
        if popular_only:
            count_stmt = count_stmt.where(Team.is_popular.is_(True))
            stmt = stmt.where(Team.is_popular.is_(True))
        with self.db.session_scope() as session:
            return list(session.scalars(stmt).all()), session.scalar(count_stmt) or 0

    def get(self, team_id: int) -> Optional[Team]:
        with self.db.session_scope() as session:
            return session.get(Team, team_id)

    def get_many(self, team_ids: list[int]) -> list[Team]:
        if not team_ids:
            return []
        with self.db.session_scope() as session:
            return list(
                session.scalars(
                    select(Team).where(Team.id.in_(team_ids)).order_by(Team.name.asc())
                ).all()
            )

    def search(self, pattern: str, limit: int) -> list[Team]:
        with self.db.session_scope() as session:
            return list(
                session.scalars(
                    select(Team)
                    .where(func.lower(Team.name).like(pattern, escape="\\"))
                    .order_by(Team.name.asc())
                    .limit(limit)
                ).all()
            )

    def create(self, values: dict[str, Any]) -> Team:
        with self.db.session_scope() as session:
            team = Team(**values)
            session.add(team)
            session.flush()
            session.refresh(team)
            return team

    def update(self, team_id: int, values: dict[str, Any]) -> int:
        with self.db.session_scope() as session:
            return session.execute(update(Team).where(Team.id == team_id).values(**values)).rowcount

    def delete(self, team_id: int) -> int:
        with self.db.session_scope() as session:
            return session.execute(delete(Team).where(Team.id == team_id)).rowcount

    def bulk_upsert(self, rows: list[dict[str, Any]]) -> int:
        """Insert-or-update nach Team-ID"""
        now = datetime.now()
        rows = [{**row, "updated_at": now} for row in rows]
        with self.db.session_scope() as session:
            return self.db.upsert(session, Team, rows, ["id"], TEAM_UPSERT_COLUMNS)

    def upsert_mapping(self, league_id: int, team_id: int, season: int) -> None:
        row = {"league_id": league_id, "team_id": team_id, "season": season}
        with self.db.session_scope() as session:
            self.db.upsert(session, LeagueTeamSeason, [row], ["league_id", "team_id", "season"])

    def find_mapped_team_ids(self, league_id: int, season: Optional[int] = None) -> list[int]:
        stmt = select(LeagueTeamSeason.team_id).where(LeagueTeamSeason.league_id == league_id)
        if season is not None:
            stmt = stmt.where(LeagueTeamSeason.season == season)
        with self.db.session_scope() as session:
            return sorted(set(session.scalars(stmt).all()))
