"""Feature module discovery and registration.

Every immediate subdirectory of the modules directory that contains an
``__init__.py`` is a feature module. Its ``register`` function (or ``default``)
receives a :class:`ModuleContext` and returns a manifest describing routes,
exported services and startup tasks. A module that fails to import or register
is logged and skipped; the others still load.
"""
from __future__ import annotations

import hashlib
import importlib
import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import ModuleType
from typing import Any, Optional

from fastapi import APIRouter

from ..core.container import Container
from ..core.tokens import Tokens

logger = logging.getLogger(__name__)

ENTRY_FILE = "__init__.py"
DEFAULT_MODULES_PACKAGE = "kickoffhub.modules"
DEFAULT_MODULES_PATH = Path(__file__).resolve().parent.parent / "modules"


@dataclass(frozen=True)
class ModuleManifest:
    name: str
    base_path: str = "/"
    routes: Optional[APIRouter] = None
    public_routes: Optional[APIRouter] = None
    private_routes: Optional[APIRouter] = None
    public_api: dict[str, Any] = field(default_factory=dict)
    tasks: tuple[Callable[[], Any], ...] = ()


@dataclass
class ModuleContext:
    """Was eine ``register`` Funktion zu sehen bekommt"""

    container: Container

    @property
    def logger(self) -> logging.Logger:
        if self.container.has(Tokens.LOGGER):
            return self.container.get(Tokens.LOGGER)
        return logger


_MANIFEST_FIELDS = {f.name for f in fields(ModuleManifest)}


def normalize_manifest(raw: Any, fallback_name: str) -> ModuleManifest:
    """Fill in defaults so every manifest has all fields populated.

    Accepts a ``ModuleManifest``, a mapping with the same snake_case keys
    (unknown keys are ignored) or ``None``.
    """
    if isinstance(raw, ModuleManifest):
        values = {f: getattr(raw, f) for f in _MANIFEST_FIELDS}
    elif isinstance(raw, Mapping):
        values = {k: v for k, v in raw.items() if k in _MANIFEST_FIELDS}
    elif raw is None:
        values = {}
    else:
        raise TypeError(
            f"register() must return a ModuleManifest, dict or None, got {type(raw).__name__}"
        )

    tasks = values.get("tasks") or ()
    if callable(tasks):
        tasks = (tasks,)

    return ModuleManifest(
        name=values.get("name") or fallback_name,
        base_path=values.get("base_path") or "/",
        routes=values.get("routes"),
        public_routes=values.get("public_routes"),
        private_routes=values.get("private_routes"),
        public_api=dict(values.get("public_api") or {}),
        tasks=tuple(tasks),
    )


def _discover(modules_dir: Path) -> list[Path]:
    candidates = []
    for entry in sorted(modules_dir.iterdir(), key=lambda p: p.name):
        if not entry.is_dir():
            continue
        if not (entry / ENTRY_FILE).is_file():
            continue
        candidates.append(entry)
    return candidates


def _import_from_path(module_dir: Path) -> ModuleType:
    # eindeutiger Name pro Verzeichnis, damit gleichnamige Module sich nicht überschreiben
    digest = hashlib.sha1(str(module_dir.resolve()).encode()).hexdigest()[:10]
    import_name = f"_kickoffhub_ext_{digest}_{module_dir.name}"
    spec = importlib.util.spec_from_file_location(
        import_name,
        module_dir / ENTRY_FILE,
        submodule_search_locations=[str(module_dir)],
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load {ENTRY_FILE} from {module_dir}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[import_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(import_name, None)
        raise
    return module


def _resolve_register(module: ModuleType) -> Optional[Callable[..., Any]]:
    for attr in ("default", "register"):
        candidate = getattr(module, attr, None)
        if callable(candidate):
            return candidate
    return None


async def load_modules(
    container: Container, modules_path: str | Path | None = None
) -> list[ModuleManifest]:
    """Discover, import and register feature modules, one after another.

    Args:
        container: shared dependency container handed to every module
        modules_path: override for the modules directory; defaults to the
            ``kickoffhub.modules`` package

    Returns:
        Normalized manifests in discovery order. Modules that failed are omitted.
    """
    modules_dir = Path(modules_path) if modules_path else DEFAULT_MODULES_PATH
    use_package_import = modules_dir.resolve() == DEFAULT_MODULES_PATH

    try:
        candidates = _discover(modules_dir)
    except FileNotFoundError:
        logger.warning(f"Modules directory {modules_dir} does not exist, no modules loaded")
        return []

    log = container.get(Tokens.LOGGER) if container.has(Tokens.LOGGER) else logger
    context = ModuleContext(container=container)
    manifests: list[ModuleManifest] = []

    for module_dir in candidates:
        name = module_dir.name
        try:
            if use_package_import:
                module = importlib.import_module(f"{DEFAULT_MODULES_PACKAGE}.{name}")
            else:
                module = _import_from_path(module_dir)

            register = _resolve_register(module)
            if register is None:
                logger.debug(f"Module '{name}' has no register function, skipping")
                continue

            result = register(context)
            if inspect.isawaitable(result):
                result = await result

            manifest = normalize_manifest(result, name)
        except Exception as e:
            log.exception(f"Failed to load module '{name}': {e}")
            continue

        manifests.append(manifest)
        log.info(f"Loaded module '{manifest.name}'")

    return manifests


__all__ = [
    "ModuleManifest",
    "ModuleContext",
    "normalize_manifest",
    "load_modules",
]
