import time

import httpx
import pytest

from app.config import GeocoderConfig
from app.services.geocoder import Geocoder
from app.services.hazard_parser import UNKNOWN_LOCATION


def _geocoder(handler, min_interval_s=0.0):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Geocoder(GeocoderConfig(min_interval_s=min_interval_s), client=client)


class Nominatim:
    """Mock Nominatim search endpoint that records each request."""

    def __init__(self, results=None, status=200):
        self.results = [{"lat": "13.0500", "lon": "80.2824"}] if results is None else results
        self.status = status
        self.requests: list[httpx.Request] = []
        self.times: list[float] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.times.append(time.monotonic())
        return httpx.Response(self.status, json=self.results)


@pytest.mark.asyncio
async def test_resolves_first_result_as_floats():
    api = Nominatim()
    geo = _geocoder(api)
    coords = await geo.geocode("Marina Beach")
    assert coords.lat == pytest.approx(13.05)
    assert coords.lon == pytest.approx(80.2824)

    req = api.requests[0]
    assert req.url.params["q"] == "Marina Beach"
    assert req.url.params["format"] == "json"
    assert req.url.params["limit"] == "1"
    assert req.headers["User-Agent"].startswith("OceanSaksham/")


@pytest.mark.asyncio
async def test_sentinel_and_empty_skip_network():
    api = Nominatim()
    geo = _geocoder(api)
    assert await geo.geocode(UNKNOWN_LOCATION) is None
    assert await geo.geocode("") is None
    assert await geo.geocode(None) is None
    assert api.requests == []


@pytest.mark.asyncio
async def test_cache_hit_skips_lookup():
    api = Nominatim()
    geo = _geocoder(api)
    first = await geo.geocode("Port X")
    second = await geo.geocode("Port X")
    assert first == second
    assert len(api.requests) == 1


@pytest.mark.asyncio
async def test_cache_is_case_preserving():
    api = Nominatim()
    geo = _geocoder(api)
    await geo.geocode("Port X")
    await geo.geocode("port x")
    assert len(api.requests) == 2


@pytest.mark.asyncio
async def test_empty_result_not_cached():
    api = Nominatim(results=[])
    geo = _geocoder(api)
    assert await geo.geocode("Atlantis") is None
    assert await geo.geocode("Atlantis") is None
    assert len(api.requests) == 2
    assert "Atlantis" not in geo.cache


@pytest.mark.asyncio
async def test_http_error_returns_none():
    geo = _geocoder(Nominatim(status=503))
    assert await geo.geocode("Somewhere") is None


@pytest.mark.asyncio
async def test_malformed_response_returns_none():
    geo = _geocoder(Nominatim(results=[{"display_name": "no coords"}]))
    assert await geo.geocode("Somewhere") is None

    geo = _geocoder(lambda request: httpx.Response(200, text="<html>"))
    assert await geo.geocode("Somewhere") is None


@pytest.mark.asyncio
async def test_network_error_returns_none():
    def boom(request):
        raise httpx.ConnectError("no route to host")

    geo = _geocoder(boom)
    assert await geo.geocode("Somewhere") is None


@pytest.mark.asyncio
async def test_distinct_lookups_are_spaced():
    api = Nominatim()
    geo = _geocoder(api, min_interval_s=0.2)
    await geo.geocode("Place A")
    await geo.geocode("Place B")
    assert len(api.times) == 2
    # Small tolerance for event loop clock granularity.
    assert api.times[1] - api.times[0] >= 0.19


@pytest.mark.asyncio
async def test_concurrent_lookups_share_the_throttle():
    import asyncio

    api = Nominatim()
    geo = _geocoder(api, min_interval_s=0.1)
    await asyncio.gather(*(geo.geocode(f"Place {i}") for i in range(3)))
    gaps = [b - a for a, b in zip(api.times, api.times[1:])]
    assert len(gaps) == 2
    assert all(g >= 0.09 for g in gaps)


@pytest.mark.asyncio
async def test_overlapping_lookups_for_same_place_share_one_request():
    import asyncio

    calls = []

    async def slow(request):
        calls.append(request.url.params["q"])
        await asyncio.sleep(0.01)
        return httpx.Response(200, json=[{"lat": "11.62", "lon": "92.72"}])

    geo = _geocoder(slow)
    first, second = await asyncio.gather(geo.geocode("Port X"), geo.geocode("Port X"))
    assert calls == ["Port X"]
    assert first == second
    assert first.lat == pytest.approx(11.62)

    # Once settled, the result is served from the cache.
    assert await geo.geocode("Port X") == first
    assert calls == ["Port X"]


@pytest.mark.asyncio
async def test_overlapping_misses_are_not_remembered():
    import asyncio

    calls = []

    async def empty(request):
        calls.append(request.url.params["q"])
        await asyncio.sleep(0.01)
        return httpx.Response(200, json=[])

    geo = _geocoder(empty)
    assert await asyncio.gather(geo.geocode("Atlantis"), geo.geocode("Atlantis")) == [None, None]
    assert len(calls) == 1
    # A later call retries since negative results are not cached.
    assert await geo.geocode("Atlantis") is None
    assert len(calls) == 2
