"""Teams: CRUD, Suche, Statistiken und der API-Football Import (inkl. Hintergrund-Queue)."""

from ...core.tokens import Tokens
from ...worker.celery_app import create_celery
from .queue import TeamImportQueue
from .repository import TeamRepository
from .routes import create_routers
from .service import TeamsService


def register(context):
    container = context.container
    settings = container.get(Tokens.SETTINGS)

    queue = container.resolve(
        Tokens.TEAM_IMPORT_QUEUE,
        lambda _: TeamImportQueue(create_celery(settings), settings.import_queue_name),
    )
    service = container.resolve(
        Tokens.TEAMS,
        lambda c: TeamsService(
            TeamRepository(c.get(Tokens.DATABASE)),
            c.get(Tokens.API_FOOTBALL),
            queue=queue,
            metrics=c.get(Tokens.METRICS) if c.has(Tokens.METRICS) else None,
        ),
    )

    public, private = create_routers(service)
    return {
        "name": "teams",
        "public_routes": public,
        "private_routes": private,
        "public_api": {"service": service, "queue": queue},
    }
