"""
Exception types raised inside the geofence resolver core.

None of these ever leave InteractionRouter's intent methods; the router turns
them into part of the published GeofenceState.
"""
from __future__ import annotations

import enum

from .const import MSG_NETWORK_FAILURE, MSG_NOT_FOUND, MSG_SERVICE_ERROR


class GeofenceError(Exception):
    """Base class for all resolver errors."""


class InvalidInputError(GeofenceError, ValueError):
    """Raised when a numeric setter receives a non-finite value."""

    def __init__(self, field: str, value, message: str | None = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid {field}")


class GeocodeErrorReason(enum.Enum):
    """Why an address lookup did not produce a usable coordinate."""

    NOT_FOUND = "not_found"
    NETWORK_FAILURE = "network_failure"
    SERVICE_ERROR = "service_error"


_DEFAULT_MESSAGES = {
    GeocodeErrorReason.NOT_FOUND: MSG_NOT_FOUND,
    GeocodeErrorReason.NETWORK_FAILURE: MSG_NETWORK_FAILURE,
    GeocodeErrorReason.SERVICE_ERROR: MSG_SERVICE_ERROR,
}


class GeocodeError(GeofenceError):
    """Exception raised when an address lookup fails."""

    def __init__(self, reason: GeocodeErrorReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or _DEFAULT_MESSAGES[reason])

    @property
    def message(self) -> str:
        return str(self)


class StaleResponseError(GeofenceError):
    """
    Raised by AddressResolver when a lookup completes after a newer one was issued.

    Never user visible: the router swallows it as a no-op.
    """

    def __init__(self, request_id: int, latest_request_id: int):
        self.request_id = request_id
        self.latest_request_id = latest_request_id
        super().__init__(
            f"Geocode request {request_id} superseded by request {latest_request_id}"
        )


class GeocoderConnectionError(GeofenceError):
    """The geocoding service could not be reached."""


class GeocoderHTTPError(GeofenceError):
    """Exception raised when the geocoding service answers with a non-2xx status."""

    def __init__(self, status: int, url: str = ""):
        self.status = status
        self.url = url
        super().__init__(f"Geocoding failed ({status})")
