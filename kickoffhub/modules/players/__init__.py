"""Players: Listen, Suche, CRUD, Statistiken und Kader-Import aus API-Football."""

from ...core.tokens import Tokens
from ..player_team_league_season import build_service as build_membership_service
from .repository import PlayerRepository
from .routes import create_routers
from .service import PlayersService


def register(context):
    container = context.container
    memberships = container.resolve(Tokens.PLAYER_TEAM_LEAGUE_SEASON, build_membership_service)
    service = container.resolve(
        Tokens.PLAYERS,
        lambda c: PlayersService(
            PlayerRepository(c.get(Tokens.DATABASE)),
            c.get(Tokens.API_FOOTBALL),
            memberships,
            metrics=c.get(Tokens.METRICS) if c.has(Tokens.METRICS) else None,
        ),
    )
    public, private = create_routers(service)
    return {
        "name": "players",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service},
    }
