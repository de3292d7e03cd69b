"""
FastAPI Application Main
Hauptanwendung für die KickOffHub API
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Sequence

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from ..bootstrap.http_router import build_api_router
from ..bootstrap.module_loader import ModuleManifest
from ..core.config import Settings
from ..core.container import Container
from ..core.exceptions import AppException
from ..core.tokens import Tokens
from ..monitoring.health_checks import HealthChecker
from ..monitoring.prometheus_metrics import CONTENT_TYPE
from .models import APIResponse, HealthResponse


def _endpoint_label(request: Request, api_prefix: str) -> str:
    """Routen-Template als Metrik-Label, immer mit API-Prefix"""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if path is None:
        return request.url.path
    # je nach FastAPI-Version trägt die Route den Include-Prefix nicht mit
    if api_prefix and request.url.path.startswith(api_prefix) and not path.startswith(api_prefix):
        return f"{api_prefix}{path}"
    return path


def _error_response(status_code: int, error: str, code: str, details=None) -> JSONResponse:
    body = APIResponse(success=False, error=error, code=code, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def create_fastapi_app(
    settings: Settings,
    container: Container,
    manifests: Sequence[ModuleManifest],
    *,
    close_resources: bool = True,
) -> FastAPI:
    """Factory function to create the FastAPI app.

    ``container`` and ``manifests`` come from ``bootstrap_application``; the
    module routers are mounted under ``settings.api_prefix``.
    """
    logger = logging.getLogger("kickoffhub.api")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application Lifespan Management"""
        logger.info(
            f"Starting KickOffHub API ({settings.environment}) with modules: "
            f"{', '.join(m.name for m in manifests) or '-'}"
        )
        yield

        logger.info("Shutting down application")
        if close_resources:
            if container.has(Tokens.CACHE):
                await container.get(Tokens.CACHE).close()
            if container.has(Tokens.DATABASE):
                await container.get(Tokens.DATABASE).close()

    app = FastAPI(
        title="KickOffHub API",
        description="Football reference data with API-Football synchronization",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.manifests = list(manifests)

    # CORS Middleware (tighten in non-development)
    cors_origins = settings.cors_origins
    if settings.environment != "development":
        cors_origins = [o for o in cors_origins if o != "*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    metrics = container.get(Tokens.METRICS) if container.has(Tokens.METRICS) else None

    @app.middleware("http")
    async def metrics_http_middleware(request: Request, call_next):
        start = time.time()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            if metrics is not None and settings.enable_metrics:
                endpoint = _endpoint_label(request, settings.api_prefix)
                code = str(response.status_code) if response is not None else "500"
                metrics.record_api_request(request.method, endpoint, code, time.time() - start)

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        if exc.status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return _error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Request validation failed",
            "VALIDATION_ERROR",
            jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR"
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Basic health check endpoint"""
        return HealthResponse(
            status="healthy", timestamp=datetime.now(), modules=[m.name for m in manifests]
        )

    @app.get("/health/details")
    async def health_details():
        """Component health (database, redis, import queue, memory)"""
        checker = HealthChecker(
            settings,
            container.get(Tokens.DATABASE),
            cache=container.get(Tokens.CACHE) if container.has(Tokens.CACHE) else None,
        )
        result = await checker.check_all_components()
        code = 503 if result["overall_status"] == "unhealthy" else 200
        return JSONResponse(status_code=code, content=result)

    @app.get("/metrics")
    async def prometheus_metrics():
        if metrics is None or not settings.enable_metrics:
            return PlainTextResponse("metrics disabled\n", status_code=404)
        return PlainTextResponse(metrics.export_metrics(), media_type=CONTENT_TYPE)

    app.include_router(build_api_router(manifests), prefix=settings.api_prefix)

    return app
