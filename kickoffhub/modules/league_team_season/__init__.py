from ...core.tokens import Tokens
from .repository import LeagueTeamSeasonRepository
from .routes import create_routers
from .service import LeagueTeamSeasonService


def register(context):
    service = context.container.resolve(
        Tokens.LEAGUE_TEAM_SEASON,
        lambda c: LeagueTeamSeasonService(LeagueTeamSeasonRepository(c.get(Tokens.DATABASE))),
    )
    public, private = create_routers(service)
    return {
        "name": "league_team_season",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service},
    }
