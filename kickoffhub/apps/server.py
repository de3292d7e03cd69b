"""
KickOffHub API Server

Bootstrap (Container, Datenbank, Module) und uvicorn in einem Event Loop,
damit asyncpg-Pool und Redis-Client an denselben Loop gebunden sind.
"""

import asyncio
import logging
import signal
from typing import Optional

import uvicorn

from ..api.main import create_fastapi_app
from ..bootstrap import bootstrap_application
from ..core.config import Settings
from ..core.tokens import Tokens


class KickOffHubServer:
    """Hauptklasse für den API-Prozess"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.logger = logging.getLogger("kickoffhub")

        self.container = None
        self.manifests = []
        self.fastapi_app = None

        self.shutdown_event = asyncio.Event()
        self._server: Optional[uvicorn.Server] = None

    def _setup_signal_handlers(self):
        """Konfiguriert Signal Handlers für graceful shutdown"""
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._request_shutdown, signum)
            except NotImplementedError:
                # Windows: uvicorn installiert eigene Handler
                pass

    def _request_shutdown(self, signum):
        self.logger.info(f"Received signal {signum}, initiating shutdown...")
        self.shutdown_event.set()

    async def initialize(self):
        """Initialisiert Container, Module und FastAPI App"""
        try:
            self.logger.info("Initializing KickOffHub...")
            self.container, self.manifests = await bootstrap_application(self.settings)
            self.fastapi_app = create_fastapi_app(self.settings, self.container, self.manifests)
            self.logger.info("KickOffHub initialization completed")
        except Exception as e:
            self.logger.error(f"Failed to initialize KickOffHub: {e}")
            raise

    async def run_api_server(self, host: Optional[str] = None, port: Optional[int] = None):
        """Startet den API Server und wartet auf Shutdown"""
        config = uvicorn.Config(
            self.fastapi_app,
            host=host or self.settings.api_host,
            port=port or self.settings.api_port,
            log_level=self.settings.log_level.lower(),
            access_log=True,
            log_config=None,
        )
        self._server = uvicorn.Server(config)
        # Signale behandeln wir selbst
        self._server.install_signal_handlers = lambda: None

        self.logger.info(
            f"Starting API server on {config.host}:{config.port} (prefix {self.settings.api_prefix})"
        )
        server_task = asyncio.create_task(self._server.serve())
        shutdown_task = asyncio.create_task(self.shutdown_event.wait())

        done, _ = await asyncio.wait(
            {server_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if shutdown_task in done:
            self._server.should_exit = True
            await server_task
        else:
            shutdown_task.cancel()
            # Startfehler (z.B. Port belegt) nach außen geben
            server_task.result()

    async def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """Hauptausführung"""
        self._setup_signal_handlers()
        try:
            await self.initialize()
            await self.run_api_server(host, port)
        finally:
            await self.cleanup()

    async def cleanup(self):
        """Räumt alle Ressourcen auf (Lifespan hat sie ggf. schon geschlossen)"""
        if self.container is None:
            return
        try:
            self.logger.info("Cleaning up resources...")
            if self.container.has(Tokens.CACHE):
                await self.container.get(Tokens.CACHE).close()
            if self.container.has(Tokens.DATABASE):
                await self.container.get(Tokens.DATABASE).close()
            self.logger.info("Resource cleanup completed")
        except Exception as e:
            self.logger.error(f"Cleanup failed: {e}")
