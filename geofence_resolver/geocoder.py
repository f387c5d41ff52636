"""
Geocoding collaborators.

A geocoder is any awaitable callable taking a free-text query and returning a
list of {"latitude": ..., "longitude": ...} dicts (zero or one best match).
It must raise on network or service errors rather than return wrong data.

NominatimGeocoder is the default implementation, backed by aiohttp and the
public OpenStreetMap Nominatim search API.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Protocol

import aiohttp

from .const import (
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_USER_AGENT,
    GEOCODE_TIMEOUT,
    NOMINATIM_MIN_INTERVAL,
    NOMINATIM_URL,
)
from .errors import GeocoderConnectionError, GeocoderHTTPError

_LOGGER = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def __call__(self, query: str) -> list[dict[str, Any]]: ...


class NominatimGeocoder:
    """
    Forward geocoder for the Nominatim /search endpoint.

    Nominatim's usage policy asks for a descriptive User-Agent and at most one
    request per second; both are honoured here. No caching and no retry.
    """

    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        timeout: float = GEOCODE_TIMEOUT,
        min_interval: float = NOMINATIM_MIN_INTERVAL,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = base_url
        self.user_agent = user_agent
        self.accept_language = accept_language
        self.timeout = timeout
        self.min_interval = min_interval
        self._session = session
        self._owns_session = session is None
        self._last_request_at = 0.0
        self._throttle_lock = asyncio.Lock()

    async def __call__(self, query: str) -> list[dict[str, Any]]:
        return await self.geocode(query)

    async def geocode(self, query: str) -> list[dict[str, Any]]:
        """
        Search for query and return at most one match.

        Raises:
            GeocoderHTTPError: non-200 response
            GeocoderConnectionError: the service could not be reached
            ValueError: the response was not JSON
        """
        params = {"format": "json", "q": query, "limit": 1}
        headers = {
            "Accept": "application/json",
            "Accept-Language": self.accept_language,
            "User-Agent": self.user_agent,
        }

        await self._throttle()
        session = self._get_session()
        try:
            async with session.get(self.base_url, params=params, headers=headers) as resp:
                if resp.status != 200:
                    _LOGGER.warning(
                        "Nominatim returned HTTP %s for %r", resp.status, query
                    )
                    raise GeocoderHTTPError(resp.status, self.base_url)
                content_type = resp.headers.get("Content-Type", "")
                if "json" not in content_type:
                    text = await resp.text()
                    raise ValueError(f"Expected JSON but got {content_type}: {text[:200]}")
                raw = await resp.json()
        except aiohttp.ClientError as exc:
            raise GeocoderConnectionError(str(exc)) from exc

        return _normalize(raw)

    async def close(self) -> None:
        """Close the session if this geocoder created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def _throttle(self) -> None:
        async with self._throttle_lock:
            wait = self.min_interval - (time.monotonic() - self._last_request_at)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request_at = time.monotonic()


def _normalize(raw: Any) -> Any:
    """Map Nominatim's lat/lon strings to latitude/longitude; anything unexpected passes through."""
    if not isinstance(raw, list):
        return raw
    results = []
    for item in raw[:1]:
        if not isinstance(item, dict):
            results.append(item)
            continue
        results.append({
            "latitude": item.get("lat"),
            "longitude": item.get("lon"),
        })
    return results
