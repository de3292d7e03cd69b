"""
Health Checks für KickOffHub

Prüft Datenbank, Redis (Cache), die Import-Queue und den Speicher.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Optional

import psutil
import redis.asyncio as redis

from ..common.cache import RedisCache
from ..core.config import Settings
from ..database.manager import DatabaseManager


class HealthChecker:
    """Health Check System für alle Komponenten"""

    def __init__(
        self,
        settings: Settings,
        db_manager: DatabaseManager,
        cache: Optional[RedisCache] = None,
    ):
        self.settings = settings
        self.db_manager = db_manager
        self.cache = cache
        self.logger = logging.getLogger("health_checker")

    def _checks(self):
        return [
            ("database", self._check_database),
            ("redis", self._check_redis),
            ("import_queue", self._check_import_queue),
            ("memory", self._check_memory),
        ]

    async def check_all_components(self) -> dict[str, Any]:
        """Führt Health Checks für alle Komponenten parallel durch"""

        health_status = {
            "overall_status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "components": {},
        }

        checks = self._checks()
        results = await asyncio.gather(
            *(self._run_single_check(name, func) for name, func in checks)
        )

        for (component_name, _), result in zip(checks, results):
            health_status["components"][component_name] = result
            if result["status"] == "unhealthy":
                health_status["overall_status"] = "unhealthy"
            elif result["status"] == "degraded" and health_status["overall_status"] == "healthy":
                health_status["overall_status"] = "degraded"

        return health_status

    async def _run_single_check(self, component_name: str, check_func) -> dict[str, Any]:
        """Führt einen einzelnen Health Check aus"""
        start_time = time.time()

        try:
            result = await check_func()
        except Exception as e:
            self.logger.warning(f"Health check '{component_name}' failed: {e}")
            result = {"status": "unhealthy", "error": str(e)}

        result["response_time_ms"] = round((time.time() - start_time) * 1000, 2)
        result["timestamp"] = datetime.now().isoformat()
        return result

    async def _check_database(self) -> dict[str, Any]:
        """Prüft Database Health"""
        details = await self.db_manager.health_check()
        if "error" in details:
            return {"status": "unhealthy", "error": f"Database check failed: {details['error']}"}
        return {"status": "healthy", "details": details}

    async def _check_redis(self) -> dict[str, Any]:
        """Prüft Redis Health (Cache)"""
        if not self.settings.redis_url:
            return {"status": "disabled", "details": {"reason": "REDIS_URL not configured"}}

        if self.cache is not None and self.cache.enabled:
            await self.cache.ping()
        else:
            client = redis.from_url(self.settings.redis_url)
            try:
                await client.ping()
            finally:
                await client.aclose()
        return {"status": "healthy", "details": {"connection": "ok"}}

    async def _check_import_queue(self) -> dict[str, Any]:
        """Prüft die Import-Queue (Länge der Celery-Liste im Broker)"""
        if not self.settings.queue_enabled:
            return {
                "status": "degraded",
                "details": {"reason": "REDIS_URL not configured, imports run synchronously"},
            }

        client = redis.from_url(self.settings.redis_url)
        try:
            pending = await client.llen(self.settings.import_queue_name)
        finally:
            await client.aclose()
        return {
            "status": "healthy",
            "details": {"queue": self.settings.import_queue_name, "pending_jobs": pending},
        }

    async def _check_memory(self) -> dict[str, Any]:
        """Prüft Memory Usage"""
        memory = psutil.virtual_memory()
        usage_percent = memory.percent

        if usage_percent > 90:
            status = "unhealthy"
        elif usage_percent > 80:
            status = "degraded"
        else:
            status = "healthy"

        return {
            "status": status,
            "details": {
                "usage_percent": usage_percent,
                "available_gb": round(memory.available / (1024**3), 2),
            },
        }

    async def check_component(self, component_name: str) -> dict[str, Any]:
        """Prüft eine einzelne Komponente"""
        check_mapping = dict(self._checks())
        if component_name not in check_mapping:
            return {
                "status": "unknown",
                "error": f"Unknown component: {component_name}",
                "timestamp": datetime.now().isoformat(),
            }
        return await self._run_single_check(component_name, check_mapping[component_name])
