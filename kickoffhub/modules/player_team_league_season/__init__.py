from ...core.tokens import Tokens
from .repository import PlayerTeamLeagueSeasonRepository
from .routes import create_routers
from .service import PlayerTeamLeagueSeasonService


def build_service(container) -> PlayerTeamLeagueSeasonService:
    return PlayerTeamLeagueSeasonService(PlayerTeamLeagueSeasonRepository(container.get(Tokens.DATABASE)))


def register(context):
    service = context.container.resolve(Tokens.PLAYER_TEAM_LEAGUE_SEASON, build_service)
    public, private = create_routers(service)
    return {
        "name": "player_team_league_season",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service},
    }
