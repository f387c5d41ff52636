"""
Value types shared by the geofence resolver components.

Pure data: no I/O and no asyncio. Every class here is frozen; derive new
values with dataclasses.replace().
"""
from __future__ import annotations

import dataclasses
import enum
import math
from typing import Generic, TypeVar

from .errors import GeocodeErrorReason, InvalidInputError

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


class ResolutionStatus(enum.Enum):
    """Lifecycle of the address lookup as shown next to the address field."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class Resolution:
    """Lookup status; a FAILED resolution also carries the message and its reason."""

    status: ResolutionStatus = ResolutionStatus.IDLE
    error_message: str | None = None
    reason: GeocodeErrorReason | None = None


IDLE = Resolution()
PENDING = Resolution(ResolutionStatus.PENDING)
RESOLVED = Resolution(ResolutionStatus.RESOLVED)


@dataclasses.dataclass(frozen=True)
class GeocodeResult:
    """
    One successful lookup, tagged with the id of the request that produced it.

    Transient: the router consumes it once and drops it.
    """

    coordinate: Coordinate
    request_id: int


@dataclasses.dataclass(frozen=True)
class ClampResult(Generic[T]):
    """
    Outcome of an accepted setter call.

    clamped is True when the raw input was outside its range and was pulled
    to the nearest bound; note then carries a human-readable explanation.
    """

    value: T
    clamped: bool = False
    note: str | None = None


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def to_finite_float(value, field: str) -> float:
    """Convert raw numeric-field input to float, rejecting NaN, inf and non-numbers."""
    # bool is an int subclass but never a meaningful coordinate or radius
    if value is None or isinstance(value, bool):
        raise InvalidInputError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(field, value) from exc
    if not math.isfinite(number):
        raise InvalidInputError(field, value)
    return number
