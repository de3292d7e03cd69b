"""Aggregated API router built from module manifests."""

from collections.abc import Sequence

from fastapi import APIRouter, Depends

from ..api.dependencies import require_api_key
from .module_loader import ModuleManifest


def _join_prefix(base_path: str) -> str:
    prefix = "/" + base_path.strip("/")
    return "" if prefix == "/" else prefix


def build_api_router(manifests: Sequence[ModuleManifest]) -> APIRouter:
    """Mount every manifest's routers under its ``base_path``.

    ``routes`` and ``public_routes`` are mounted as-is, ``private_routes``
    behind the API-key dependency.
    """
    api_router = APIRouter()
    for manifest in manifests:
        prefix = _join_prefix(manifest.base_path)
        tags = [manifest.name]
        for router in (manifest.routes, manifest.public_routes):
            if router is not None:
                api_router.include_router(router, prefix=prefix, tags=tags)
        if manifest.private_routes is not None:
            api_router.include_router(
                manifest.private_routes,
                prefix=prefix,
                tags=tags,
                dependencies=[Depends(require_api_key)],
            )
    return api_router
