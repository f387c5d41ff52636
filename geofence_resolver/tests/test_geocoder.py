"""
Tests for NominatimGeocoder with a mocked aiohttp session, plus its
interaction with AddressResolver error mapping.
"""

from __future__ import annotations

import time
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp

from geofence_resolver.errors import (
    GeocodeError,
    GeocodeErrorReason,
    GeocoderConnectionError,
    GeocoderHTTPError,
)
from geofence_resolver.geocoder import NominatimGeocoder
from geofence_resolver.models import Coordinate
from geofence_resolver.resolver import AddressResolver

SUNRISE_BEACH_JSON = [
    {"lat": "34.0200000", "lon": "-118.8000000", "display_name": "Sunrise Beach, Malibu"},
]


def make_response(status: int = 200, payload=None, content_type: str = "application/json"):
    resp = MagicMock()
    resp.status = status
    resp.headers = {"Content-Type": content_type}
    resp.json = AsyncMock(return_value=payload)
    resp.text = AsyncMock(return_value="<html>busy</html>")
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx


def make_session(*responses) -> MagicMock:
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    session.get = MagicMock(side_effect=list(responses))
    return session


class TestNominatimGeocoder(unittest.IsolatedAsyncioTestCase):

    async def test_maps_lat_lon_to_latitude_longitude(self):
        session = make_session(make_response(payload=SUNRISE_BEACH_JSON))
        geocoder = NominatimGeocoder(session=session, min_interval=0)

        results = await geocoder("Sunrise Beach")

        self.assertEqual(results[0]["latitude"], "34.0200000")
        self.assertEqual(results[0]["longitude"], "-118.8000000")
        self.assertEqual(set(results[0]), {"latitude", "longitude"})

    async def test_sends_query_and_policy_headers(self):
        session = make_session(make_response(payload=[]))
        geocoder = NominatimGeocoder(
            base_url="https://geocode.example.org/search",
            user_agent="tests/1.0 (dev@example.org)",
            session=session,
            min_interval=0,
        )

        await geocoder.geocode("Sunrise Beach")

        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://geocode.example.org/search")
        self.assertEqual(kwargs["params"], {"format": "json", "q": "Sunrise Beach", "limit": 1})
        self.assertEqual(kwargs["headers"]["User-Agent"], "tests/1.0 (dev@example.org)")
        self.assertEqual(kwargs["headers"]["Accept"], "application/json")

    async def test_only_the_best_match_is_returned(self):
        payload = SUNRISE_BEACH_JSON + [{"lat": "1", "lon": "2"}]
        geocoder = NominatimGeocoder(session=make_session(make_response(payload=payload)), min_interval=0)
        self.assertEqual(len(await geocoder("Sunrise Beach")), 1)

    async def test_non_200_raises_http_error(self):
        geocoder = NominatimGeocoder(session=make_session(make_response(status=503)), min_interval=0)
        with self.assertRaises(GeocoderHTTPError) as ctx:
            await geocoder("Sunrise Beach")
        self.assertEqual(ctx.exception.status, 503)

    async def test_client_error_raises_connection_error(self):
        session = make_session(aiohttp.ClientConnectionError("refused"))
        geocoder = NominatimGeocoder(session=session, min_interval=0)
        with self.assertRaises(GeocoderConnectionError):
            await geocoder("Sunrise Beach")

    async def test_non_json_body_raises_value_error(self):
        session = make_session(make_response(content_type="text/html"))
        geocoder = NominatimGeocoder(session=session, min_interval=0)
        with self.assertRaises(ValueError):
            await geocoder("Sunrise Beach")

    async def test_requests_are_spaced_by_min_interval(self):
        session = make_session(make_response(payload=[]), make_response(payload=[]))
        geocoder = NominatimGeocoder(session=session, min_interval=0.1)

        start = time.monotonic()
        await geocoder("a")
        await geocoder("b")

        self.assertGreaterEqual(time.monotonic() - start, 0.09)

    async def test_close_leaves_injected_session_open(self):
        session = make_session()
        geocoder = NominatimGeocoder(session=session)
        await geocoder.close()
        session.close.assert_not_awaited()

    async def test_close_releases_own_session(self):
        own_session = make_session(make_response(payload=[]))
        with patch("geofence_resolver.geocoder.aiohttp.ClientSession", return_value=own_session) as factory:
            geocoder = NominatimGeocoder(min_interval=0)
            await geocoder("Sunrise Beach")
            await geocoder.close()

        factory.assert_called_once()
        own_session.close.assert_awaited_once()


class TestResolverWithNominatim(unittest.IsolatedAsyncioTestCase):

    async def _resolve(self, response):
        geocoder = NominatimGeocoder(session=make_session(response), min_interval=0)
        return await AddressResolver(geocoder).resolve("Sunrise Beach")

    async def test_resolves_nominatim_strings(self):
        result = await self._resolve(make_response(payload=SUNRISE_BEACH_JSON))
        self.assertEqual(result.coordinate, Coordinate(34.02, -118.80))

    async def test_error_reasons(self):
        cases = (
            (make_response(payload=[]), GeocodeErrorReason.NOT_FOUND),
            (make_response(status=429), GeocodeErrorReason.NETWORK_FAILURE),
            (aiohttp.ClientConnectionError("refused"), GeocodeErrorReason.NETWORK_FAILURE),
            (make_response(content_type="text/html"), GeocodeErrorReason.SERVICE_ERROR),
            (make_response(payload={"error": "bad request"}), GeocodeErrorReason.SERVICE_ERROR),
        )
        for response, reason in cases:
            with self.subTest(reason=reason):
                with self.assertRaises(GeocodeError) as ctx:
                    await self._resolve(response)
                self.assertIs(ctx.exception.reason, reason)
