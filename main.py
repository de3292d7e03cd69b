"""
KickOffHub - Hauptanwendung

Zentraler Einstiegspunkt für den API-Prozess. Der Import-Worker läuft separat
(``python -m kickoffhub.worker.main`` bzw. ``kickoffhub worker``).
"""

import asyncio
import logging
import sys

from kickoffhub.apps.server import KickOffHubServer
from kickoffhub.common.logging_utils import configure_logging
from kickoffhub.core.config import Settings


async def main():
    """Haupteinstiegspunkt"""
    try:
        settings = Settings()
        configure_logging(service="api", level=settings.log_level)

        server = KickOffHubServer(settings)
        await server.run()

    except KeyboardInterrupt:
        print("\nShutdown requested by user")
    except Exception as e:
        logging.error(f"KickOffHub failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
