from typing import Any

from ...common.parsing import parse_positive_int
from ...core.exceptions import NotFoundException
from ...domain.models import LeagueTeamSeasonOut, TeamOut, dump_many
from .repository import LeagueTeamSeasonRepository


def _optional_positive_int(value: Any, field: str):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_positive_int(value, field)


class LeagueTeamSeasonService:
    """Zuordnung Liga/Team/Saison (wird vom Team-Import befüllt)"""

    def __init__(self, repository: LeagueTeamSeasonRepository):
        self.repository = repository

    async def list_mappings(
        self, league_id: Any = None, team_id: Any = None, season: Any = None
    ) -> list[dict[str, Any]]:
        rows = self.repository.find(
            league_id=_optional_positive_int(league_id, "league_id"),
            team_id=_optional_positive_int(team_id, "team_id"),
            season=_optional_positive_int(season, "season"),
        )
        return dump_many(LeagueTeamSeasonOut, rows)

    async def list_teams(self, league_id: Any, season: Any) -> list[dict[str, Any]]:
        league_id = parse_positive_int(league_id, "league_id")
        season = parse_positive_int(season, "season")
        return dump_many(TeamOut, self.repository.teams_for(league_id, season))

    async def delete_mapping(self, league_id: Any, team_id: Any, season: Any) -> None:
        deleted = self.repository.delete(
            parse_positive_int(league_id, "league_id"),
            parse_positive_int(team_id, "team_id"),
            parse_positive_int(season, "season"),
        )
        if not deleted:
            raise NotFoundException("Record does not exist")
