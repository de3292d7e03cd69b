"""
Applications Package für KickOffHub

Enthält den API-Prozess (``KickOffHubServer``) und die CLI.
"""

from .server import KickOffHubServer

__all__ = ["KickOffHubServer"]
