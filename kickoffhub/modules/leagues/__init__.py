"""Leagues: CRUD mit gecachter Liste."""

from ...core.tokens import Tokens
from .repository import LeagueRepository
from .routes import create_routers
from .service import LeaguesService


def register(context):
    container = context.container
    settings = container.get(Tokens.SETTINGS)
    service = container.resolve(
        Tokens.LEAGUES,
        lambda c: LeaguesService(
            LeagueRepository(c.get(Tokens.DATABASE)),
            cache=c.get(Tokens.CACHE) if c.has(Tokens.CACHE) else None,
            cache_ttl=settings.leagues_cache_ttl,
        ),
    )
    public, private = create_routers(service)
    return {
        "name": "leagues",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service},
    }
