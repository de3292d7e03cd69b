"""
Bootstrap
Container, Infrastruktur und Feature-Module einmal pro Prozess aufbauen
"""

import logging
from typing import Optional

from ..core.config import Settings, settings as default_settings
from ..core.container import Container, create_container
from ..core.tokens import Tokens
from .http_router import build_api_router
from .infrastructure import register_infrastructure
from .module_loader import ModuleContext, ModuleManifest, load_modules, normalize_manifest
from .tasks import run_module_tasks


async def bootstrap_application(
    settings: Optional[Settings] = None,
    *,
    container: Optional[Container] = None,
    modules_path: Optional[str] = None,
    init_database: bool = True,
) -> tuple[Container, list[ModuleManifest]]:
    """Infrastruktur registrieren, Datenbank initialisieren, Module laden und Tasks ausführen"""
    settings = settings or default_settings
    container = container or create_container()
    register_infrastructure(container, settings)
    logger: logging.Logger = container.get(Tokens.LOGGER)

    if init_database:
        db = container.get(Tokens.DATABASE)
        if db.engine is None:
            await db.initialize()
        db.create_tables()

    manifests = await load_modules(container, modules_path or settings.modules_path)
    container.get(Tokens.METRICS).set_modules_loaded(len(manifests))
    logger.info(f"Loaded {len(manifests)} module(s): {', '.join(m.name for m in manifests)}")

    await run_module_tasks(manifests, logger)
    return container, manifests


__all__ = [
    "bootstrap_application",
    "build_api_router",
    "register_infrastructure",
    "load_modules",
    "normalize_manifest",
    "run_module_tasks",
    "ModuleManifest",
    "ModuleContext",
]
