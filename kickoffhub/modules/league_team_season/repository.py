from typing import Optional

from sqlalchemy import delete, select

from ...database.manager import DatabaseManager
from ...database.schema import LeagueTeamSeason, Team


class LeagueTeamSeasonRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def find(
        self,
        league_id: Optional[int] = None,
        team_id: Optional[int] = None,
        season: Optional[int] = None,
    ) -> list[LeagueTeamSeason]:
        stmt = select(LeagueTeamSeason)
        if league_id is not None:
            stmt = stmt.where(LeagueTeamSeason.league_id == league_id)
        if team_id is not None:
            stmt = stmt.where(LeagueTeamSeason.team_id == team_id)
        if season is not None:
            stmt = stmt.where(LeagueTeamSeason.season == season)
        stmt = stmt.order_by(
            LeagueTeamSeason.league_id.asc(),
            LeagueTeamSeason.season.desc(),
            LeagueTeamSeason.team_id.asc(),
        )
        with self.db.session_scope() as session:
            return list(session.scalars(stmt).all())

    def teams_for(self, league_id: int, season: int) -> list[Team]:
        team_ids = (
            select(LeagueTeamSeason.team_id)
            .where(LeagueTeamSeason.league_id == league_id, LeagueTeamSeason.season == season)
            .distinct()
        )
        with self.db.session_scope() as session:
            return list(
                session.scalars(
                    select(Team).where(Team.id.in_(team_ids)).order_by(Team.name.asc())
                ).all()
            )

    def delete(self, league_id: int, team_id: int, season: int) -> int:
        with self.db.session_scope() as session:
            result = session.execute(
                delete(LeagueTeamSeason).where(
                    LeagueTeamSeason.league_id == league_id,
                    LeagueTeamSeason.team_id == team_id,
                    LeagueTeamSeason.season == season,
                )
            )
            return result.rowcount
