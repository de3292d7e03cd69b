"""
API-Football Client
Async HTTP-Client (aiohttp) mit Rate Limiting und optionalem Redis-Cache
"""

import asyncio
import hashlib
import json
import logging
from typing import Any, Optional

import aiohttp

from ...common.cache import RedisCache
from ...common.rate_limit import RateLimiter
from ...core.config import APIConfig
from ...core.exceptions import UpstreamError, UpstreamTimeoutError

CACHE_PREFIX = "api-football"


class ApiFootballClient:
    """Client für https://v3.football.api-sports.io"""

    def __init__(
        self,
        config: APIConfig,
        cache: Optional[RedisCache] = None,
        cache_ttl: int = 300,
    ):
        self.config = config
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.rate_limiter = RateLimiter(config.rate_limit)
        self.logger = logging.getLogger("api_football")
        if not config.api_key:
            self.logger.warning("API_FOOTBALL_KEY is not set; upstream requests will be rejected")

    @staticmethod
    def build_cache_key(path: str, params: Optional[dict[str, Any]] = None) -> str:
        digest = hashlib.sha1()
        digest.update(path.encode("utf-8"))
        digest.update(json.dumps(params or {}, sort_keys=True, default=str).encode("utf-8"))
        return f"{CACHE_PREFIX}:{digest.hexdigest()}"

    @property
    def caching_enabled(self) -> bool:
        return self.cache is not None and self.cache.enabled and self.cache_ttl > 0

    async def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        *,
        use_cache: bool = True,
        ttl: Optional[int] = None,
    ) -> dict[str, Any]:
        """GET auf einen API-Football Endpoint, Antwort als dict.

        Raises:
            UpstreamTimeoutError: Timeout laut ``timeout_seconds``
            UpstreamError: Verbindungsfehler oder Nicht-2xx-Antwort
        """
        params = params or {}
        cache_key = self.build_cache_key(path, params)
        should_cache = use_cache and self.caching_enabled

        if should_cache:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                self.logger.debug(f"Cache hit for {path} {params}")
                return cached

        data = await self._request(path, params)

        if should_cache:
            await self.cache.set(cache_key, data, ttl if ttl is not None else self.cache_ttl)
        return data

    async def _request(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.config.base_url}/{path.lstrip('/')}"
        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        # API-Football erwartet Query-Werte als Strings
        query = {k: str(v) for k, v in params.items() if v is not None}

        await self.rate_limiter.acquire()
        try:
            async with aiohttp.ClientSession(headers=self.config.headers, timeout=timeout) as session:
                async with session.get(url, params=query) as response:
                    if response.status >= 400:
                        body = await self._read_body(response)
                        self.logger.warning(
                            f"API-Football {path} answered {response.status}: {body}"
                        )
                        raise UpstreamError(
                            "Could not fetch data from API-Football",
                            details={"status": response.status, "body": body},
                        )
                    data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            self.logger.warning(
                f"API-Football request {path} timed out after {self.config.timeout_seconds}s"
            )
            raise UpstreamTimeoutError("Timed out while calling API-Football") from None
        except aiohttp.ClientError as e:
            self.logger.error(f"API-Football request {path} failed: {e}")
            raise UpstreamError("Could not reach API-Football", details={"reason": str(e)}) from e

        if isinstance(data, dict) and data.get("errors"):
            self.logger.warning(f"API-Football {path} reported errors: {data['errors']}")
        return data

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        try:
            return json.loads(text)
        except ValueError:
            return text
