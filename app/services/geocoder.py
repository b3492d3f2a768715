"""Place-name geocoding against Nominatim with a memo cache and courtesy throttle.

Nominatim's usage policy allows roughly one request per second per client, so
every lookup in the process shares one dispatch clock. Concurrent lookups for
different places queue behind each other; concurrent lookups for the same
place share one request.
"""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from app.config import GeocoderConfig
from app.schemas import Coordinates
from app.services.hazard_parser import UNKNOWN_LOCATION

logger = logging.getLogger(__name__)


class Geocoder:
    def __init__(self, config: GeocoderConfig, client: httpx.AsyncClient | None = None):
        self._config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout_s)
        self._owns_client = client is None
        self._cache: dict[str, Coordinates] = {}
        self._lock = asyncio.Lock()
        self._last_dispatch = float("-inf")
        self._inflight: dict[str, asyncio.Future] = {}

    @property
    def cache(self) -> dict[str, Coordinates]:
        return self._cache

    async def geocode(self, place: str | None) -> Coordinates | None:
        """Resolve a location phrase to coordinates. Returns None on any failure."""
        if not place or place == UNKNOWN_LOCATION:
            return None
        cached = self._cache.get(place)
        if cached is not None:
            return cached

        pending = self._inflight.get(place)
        if pending is None:
            pending = asyncio.ensure_future(self._lookup(place))
            self._inflight[place] = pending
            pending.add_done_callback(lambda _: self._inflight.pop(place, None))
        # Shielded so one caller's cancellation does not cancel the shared lookup.
        return await asyncio.shield(pending)

    async def _lookup(self, place: str) -> Coordinates | None:
        await self._throttle()

        try:
            resp = await self._client.get(
                self._config.base_url,
                params={"q": place, "format": "json", "limit": 1},
                headers={"User-Agent": self._config.user_agent},
            )
            resp.raise_for_status()
            results = resp.json()
            if not results:
                logger.info("geocode no match for %r", place)
                return None
            first = results[0]
            coords = Coordinates(lat=float(first["lat"]), lon=float(first["lon"]))
        except httpx.HTTPStatusError as exc:
            logger.error("Geocode error: HTTP %d for %r", exc.response.status_code, place)
            return None
        except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError) as e:
            logger.error("Geocode error for %r: %s", place, e)
            return None

        self._cache[place] = coords
        return coords

    async def _throttle(self) -> None:
        """Wait until min_interval_s has passed since the previous dispatch, then stamp it."""
        async with self._lock:
            wait = self._config.min_interval_s - (time.monotonic() - self._last_dispatch)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_dispatch = time.monotonic()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
