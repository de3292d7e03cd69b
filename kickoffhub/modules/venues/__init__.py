"""Venues: Stadien mit CRUD und Einzelimport aus API-Football."""

from ...core.tokens import Tokens
from .repository import VenueRepository
from .routes import create_routers
from .service import VenuesService


def register(context):
    service = context.container.resolve(
        Tokens.VENUES,
        lambda c: VenuesService(
            VenueRepository(c.get(Tokens.DATABASE)),
            c.get(Tokens.API_FOOTBALL),
            metrics=c.get(Tokens.METRICS) if c.has(Tokens.METRICS) else None,
        ),
    )
    public, private = create_routers(service)
    return {
        "name": "venues",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service},
    }
