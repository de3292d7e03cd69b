"""API-Football Integration: stellt den Client für andere Module bereit (keine Routen)."""

from ...core.config import APIConfig
from ...core.tokens import Tokens
from .client import ApiFootballClient


def register(context):
    container = context.container
    settings = container.get(Tokens.SETTINGS)
    cache = container.get(Tokens.CACHE) if container.has(Tokens.CACHE) else None

    client = container.resolve(
        Tokens.API_FOOTBALL,
        lambda _: ApiFootballClient(
            APIConfig.api_football(settings), cache=cache, cache_ttl=settings.api_football_cache_ttl
        ),
    )

    return {
        "name": "api_football",
        "base_path": None,
        "routes": None,
        "public_api": {"client": client},
    }
