"""
Command-line interface for KickOffHub.
Usage examples:
  kickoffhub serve --port 3000
  kickoffhub worker --concurrency 4
  kickoffhub modules
  kickoffhub import-teams --league 39 --season 2023 --background
  kickoffhub init-db
"""

import asyncio
import json

import click

from ..common.logging_utils import configure_logging
from ..core.config import Settings
from ..core.exceptions import AppException
from ..core.tokens import Tokens


def _load_settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


async def cmd_list_modules(settings: Settings) -> list[dict]:
    from ..bootstrap import bootstrap_application

    container, manifests = await bootstrap_application(settings, init_database=False)
    try:
        return [
            {
                "name": m.name,
                "base_path": m.base_path,
                "routers": sum(r is not None for r in (m.routes, m.public_routes, m.private_routes)),
                "private": m.private_routes is not None,
                "public_api": sorted(m.public_api),
                "tasks": len(m.tasks),
            }
            for m in manifests
        ]
    finally:
        await container.get(Tokens.CACHE).close()


async def cmd_import_teams(settings: Settings, league: int, season: int, background: bool) -> dict:
    from ..bootstrap import bootstrap_application

    container, _ = await bootstrap_application(settings)
    try:
        if not container.has(Tokens.TEAMS):
            raise click.ClickException("teams module is not loaded")
        return await container.get(Tokens.TEAMS).import_teams(league, season, background)
    finally:
        await container.get(Tokens.CACHE).close()
        await container.get(Tokens.DATABASE).close()


async def cmd_init_db(settings: Settings, drop: bool) -> None:
    from ..database.manager import DatabaseManager

    db = DatabaseManager(settings)
    try:
        db.initialize_sync()
        if drop:
            db.drop_tables()
        db.create_tables()
    finally:
        await db.close()


@click.group()
@click.option("--log-level", default=None, help="Overrides LOG_LEVEL for this run.")
@click.pass_context
def cli(ctx: click.Context, log_level):
    """KickOffHub: football reference data service"""
    ctx.ensure_object(dict)
    settings = ctx.obj.get("settings") or Settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--host", default=None, help="Bind address (default: API_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: API_PORT)")
@click.pass_context
def serve(ctx: click.Context, host, port):
    """Run the HTTP API server"""
    from .server import KickOffHubServer

    settings = _load_settings(ctx)
    configure_logging(service="api", level=settings.log_level)
    try:
        asyncio.run(KickOffHubServer(settings).run(host, port))
    except KeyboardInterrupt:
        click.echo("\nShutdown requested by user")


@cli.command()
@click.option("--concurrency", default=None, type=int, help="Worker processes (default: WORKER_CONCURRENCY)")
@click.pass_context
def worker(ctx: click.Context, concurrency):
    """Run the background import worker"""
    from ..worker.main import run_worker

    raise SystemExit(run_worker(_load_settings(ctx), concurrency=concurrency))


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def modules(ctx: click.Context, as_json: bool):
    """List the feature modules that load successfully"""
    settings = _load_settings(ctx)
    configure_logging(service="cli", level=settings.log_level)
    infos = asyncio.run(cmd_list_modules(settings))

    if as_json:
        click.echo(json.dumps(infos, indent=2))
        return

    click.echo("Loaded modules:\n")
    for it in infos:
        line = f"- {it['name']} ({it['routers']} router(s)"
        if it["private"]:
            line += ", private routes"
        click.echo(line + ")")
        if it["public_api"]:
            click.echo(f"  exposes: {', '.join(it['public_api'])}")


@cli.command(name="import-teams")
@click.option("--league", required=True, type=int, help="API-Football league id")
@click.option("--season", required=True, type=int, help="Season year, e.g. 2023")
@click.option("--background", is_flag=True, help="Enqueue on the import queue instead of running inline")
@click.pass_context
def import_teams(ctx: click.Context, league: int, season: int, background: bool):
    """Importiert Teams einer Liga/Saison aus API-Football"""
    settings = _load_settings(ctx)
    configure_logging(service="cli", level=settings.log_level)
    try:
        result = asyncio.run(cmd_import_teams(settings, league, season, background))
    except AppException as e:
        click.echo(f"Import failed: {e.message} ({e.code})", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(result, indent=2, default=str))
    if result.get("mapping_errors"):
        raise SystemExit(2)


@cli.command(name="init-db")
@click.option("--drop", is_flag=True, help="Drop all tables first")
@click.pass_context
def init_db(ctx: click.Context, drop: bool):
    """Legt die Tabellen an (idempotent)"""
    settings = _load_settings(ctx)
    configure_logging(service="cli", level=settings.log_level)
    asyncio.run(cmd_init_db(settings, drop))
    click.echo(f"Database schema ready ({settings.database_url.split('://', 1)[0]})")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
