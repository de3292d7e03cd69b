from ...core.tokens import Tokens
from .repository import SeasonRepository
from .routes import create_routers
from .service import SeasonsService


def register(context):
    service = context.container.resolve(
        Tokens.SEASONS, lambda c: SeasonsService(SeasonRepository(c.get(Tokens.DATABASE)))
    )
    public, private = create_routers(service)
    return {
        "name": "seasons",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service},
    }
