"""Countries: read-only reference data."""

from ...core.tokens import Tokens
from .repository import CountryRepository
from .routes import create_router
from .service import CountriesService


def register(context):
    container = context.container
    service = container.resolve(
        Tokens.COUNTRIES,
        lambda c: CountriesService(CountryRepository(c.get(Tokens.DATABASE))),
    )
    return {
        "name": "countries",
        "base_path": "/",
        "public_routes": create_router(service),
        "public_api": {"service": service},
    }
