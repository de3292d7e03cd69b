"""
Core Module
Zentrale Konfiguration, DI Container und Exceptions
"""

from .config import APIConfig, Settings, settings
from .container import Container, MissingDependencyError, create_container, register_if_missing
from .tokens import Tokens

__all__ = [
    "settings",
    "Settings",
    "APIConfig",
    "Container",
    "MissingDependencyError",
    "create_container",
    "register_if_missing",
    "Tokens",
]
