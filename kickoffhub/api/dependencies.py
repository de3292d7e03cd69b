"""
API Dependencies
Dependency Injection für FastAPI
"""

from typing import Optional

from fastapi import Header, Request

from ..core.config import Settings
from ..core.container import Container
from ..core.exceptions import AuthException
from ..core.tokens import Tokens


async def get_container(request: Request) -> Container:
    """Dependency für den prozessweiten Container (geteilt über App-Lebenszyklus)"""
    return request.app.state.container


async def get_settings(request: Request) -> Settings:
    return request.app.state.container.get(Tokens.SETTINGS)


async def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> None:
    """Schützt private Routen über den ``X-API-Key`` Header.

    Ohne konfigurierten Key sind private Routen nur in ``development`` offen.
    """
    settings: Settings = request.app.state.container.get(Tokens.SETTINGS)
    if not settings.api_key:
        if settings.environment == "development":
            return
        raise AuthException("API key authentication is not configured", "API_KEY_NOT_CONFIGURED")
    if x_api_key != settings.api_key:
        raise AuthException("Invalid or missing API key", "API_KEY_INVALID")
