"""
AddressResolver: turns free-text queries into coordinates via a geocoder.

Responsibilities:
- Tag every lookup with a monotonically increasing request id.
- Bound each lookup with a timeout.
- Discard completions that were superseded by a newer request.
- Map collaborator outcomes onto GeocodeError reasons.

Debouncing is the router's job; this class is a plain async call plus a counter.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from .const import GEOCODE_TIMEOUT
from .errors import (
    GeocodeError,
    GeocodeErrorReason,
    GeocoderConnectionError,
    GeocoderHTTPError,
    InvalidInputError,
    StaleResponseError,
)
from .geocoder import Geocoder
from .models import Coordinate, GeocodeResult, to_finite_float

_LOGGER = logging.getLogger(__name__)


class AddressResolver:
    """
    Resolves addresses and suppresses stale responses.

    The request id counter is instance state: it starts at zero on
    construction and is never reset, so two resolvers never interfere.
    """

    def __init__(self, geocoder: Geocoder, timeout: float = GEOCODE_TIMEOUT) -> None:
        self._geocoder = geocoder
        self._timeout = timeout
        self._latest_request_id = 0

    @property
    def geocoder(self) -> Geocoder:
        return self._geocoder

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    def invalidate(self) -> int:
        """Supersede every outstanding lookup without starting a new one."""
        self._latest_request_id += 1
        return self._latest_request_id

    def next_request_id(self) -> int:
        """Claim the id for a lookup that is about to start; older lookups become stale."""
        self._latest_request_id += 1
        return self._latest_request_id

    async def resolve(self, query: str, request_id: int | None = None) -> GeocodeResult:
        """
        Look up query and return the best match.

        Callers that schedule the lookup as a task claim request_id with
        next_request_id() before scheduling, so a supersede that lands before
        the task first runs is not lost.

        Raises:
            StaleResponseError: a newer request was issued while this one was
                outstanding (raised for successes and failures alike).
            GeocodeError: NOT_FOUND, NETWORK_FAILURE or SERVICE_ERROR.
        """
        if request_id is None:
            request_id = self.next_request_id()
        self._check_current(request_id)

        query = (query or "").strip()
        if not query:
            raise GeocodeError(GeocodeErrorReason.NOT_FOUND)

        _LOGGER.debug("Geocode request %s issued for %r", request_id, query)
        try:
            payload = await asyncio.wait_for(self._geocoder(query), timeout=self._timeout)
        except (asyncio.TimeoutError, TimeoutError) as exc:
            self._check_current(request_id)
            _LOGGER.warning("Timeout geocoding %r after %ss", query, self._timeout)
            raise GeocodeError(GeocodeErrorReason.NETWORK_FAILURE) from exc
        except GeocoderHTTPError as exc:
            self._check_current(request_id)
            _LOGGER.warning("Geocoder returned HTTP %s for %r", exc.status, query)
            raise GeocodeError(GeocodeErrorReason.NETWORK_FAILURE, str(exc)) from exc
        except (GeocoderConnectionError, OSError) as exc:
            self._check_current(request_id)
            _LOGGER.warning("Network error geocoding %r: %s", query, exc)
            raise GeocodeError(GeocodeErrorReason.NETWORK_FAILURE) from exc
        except Exception as exc:  # noqa: BLE001
            self._check_current(request_id)
            _LOGGER.error("Unexpected error geocoding %r: %s", query, exc)
            raise GeocodeError(GeocodeErrorReason.SERVICE_ERROR) from exc

        self._check_current(request_id)

        if isinstance(payload, list) and not payload:
            raise GeocodeError(GeocodeErrorReason.NOT_FOUND)
        coordinate = _parse_first_match(payload)
        if coordinate is None:
            _LOGGER.warning("Unexpected geocoder payload for %r: %s", query, payload)
            raise GeocodeError(GeocodeErrorReason.SERVICE_ERROR)

        _LOGGER.debug("Geocode request %s resolved to (%.6f, %.6f)",
                      request_id, coordinate.latitude, coordinate.longitude)
        return GeocodeResult(coordinate=coordinate, request_id=request_id)

    def _check_current(self, request_id: int) -> None:
        if request_id != self._latest_request_id:
            _LOGGER.debug("Discarding stale geocode response %s (latest is %s)",
                          request_id, self._latest_request_id)
            raise StaleResponseError(request_id, self._latest_request_id)


def _parse_first_match(payload: Any) -> Coordinate | None:
    """Return the first {latitude, longitude} entry as a Coordinate, or None if malformed."""
    if not isinstance(payload, list):
        return None
    item = payload[0]
    if not isinstance(item, dict):
        return None
    try:
        return Coordinate(
            latitude=to_finite_float(item.get("latitude"), "latitude"),
            longitude=to_finite_float(item.get("longitude"), "longitude"),
        )
    except InvalidInputError:
        return None
