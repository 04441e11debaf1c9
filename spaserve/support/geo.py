"""
Access logging with best-effort client geolocation.
"""

import asyncio
import logging
from typing import Optional, Set

import httpx
import structlog

logger = logging.getLogger(__name__)

PLACEHOLDER_LOCATION = "-"


class RequestLocator:
    """
    Logs each request with the client's approximate location.

    Lookups run as background tasks so they never delay a response.
    Without an HTTP client (geolocation disabled or not started) requests
    are logged immediately with the placeholder location.
    """

    def __init__(self, lookup_url: str = "http://ip-api.com/json/", timeout: float = 2.0):
        self._lookup_url = lookup_url
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        self._pending: Set[asyncio.Task] = set()
        self._access_log = structlog.get_logger("spaserve.access")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def open(self) -> None:
        """Create the HTTP client used for lookups."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

    async def close(self) -> None:
        """Cancel in-flight lookups and close the HTTP client."""
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def locate(self, ip: str) -> str:
        """Look up "country region city" for ip; never raises."""
        if self._client is None or not ip:
            return PLACEHOLDER_LOCATION

        try:
            response = await self._client.get(self._lookup_url + ip)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Geolocation lookup failed for {ip}: {e}")
            return PLACEHOLDER_LOCATION

        if data.get("status") == "fail":
            return str(data.get("message", PLACEHOLDER_LOCATION))

        parts = [data.get("country"), data.get("regionName"), data.get("city")]
        return " ".join(str(part) for part in parts if part) or PLACEHOLDER_LOCATION

    def track(self, ip: str, url: str) -> None:
        """Log a request, enriching it with a location when enabled."""
        if not self.enabled:
            self._access_log.info("request", ip=ip, location=PLACEHOLDER_LOCATION, url=url)
            return

        task = asyncio.create_task(self._track(ip, url))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _track(self, ip: str, url: str) -> None:
        location = await self.locate(ip)
        self._access_log.info("request", ip=ip, location=location, url=url)
