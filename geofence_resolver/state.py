"""
GeofenceState — immutable snapshot published by InteractionRouter.

This is a pure data module with no asyncio or network dependencies.
"""
from __future__ import annotations

import dataclasses

from .const import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_RADIUS,
    STATUS_TEXT_PENDING,
    STATUS_TEXT_READY,
)
from .models import IDLE, Coordinate, Resolution, ResolutionStatus
from .radius import RadiusController


@dataclasses.dataclass(frozen=True)
class GeofenceState:
    """
    Typed, copy-on-write snapshot of the geofence being edited.

    Always replace via dataclasses.replace(), never mutate in place.
    """

    # None only until a location has been established for the first time
    coordinate: Coordinate | None = None

    # Meters, already clamped by RadiusController
    radius: float = DEFAULT_RADIUS

    # Echo of the address text field; may diverge from coordinate after map edits
    address_query: str = ""

    resolution: Resolution = IDLE

    # Transient clamp / invalid-input warning attached to this snapshot only
    notice: str | None = None

    # Sticky map tile failure message
    map_error: str | None = None

    # Where the map centers while coordinate is still None
    default_center: Coordinate = Coordinate(DEFAULT_LATITUDE, DEFAULT_LONGITUDE)

    @property
    def center(self) -> Coordinate:
        return self.coordinate or self.default_center

    @property
    def is_pending(self) -> bool:
        return self.resolution.status is ResolutionStatus.PENDING

    @property
    def status_text(self) -> str:
        return STATUS_TEXT_PENDING if self.is_pending else STATUS_TEXT_READY

    @property
    def distance_km(self) -> float:
        return RadiusController.distance_km(self.radius)

    @property
    def area_square_meters(self) -> float:
        return RadiusController.area_square_meters(self.radius)

    @property
    def area_hectares(self) -> float:
        return RadiusController.area_hectares(self.radius)

    @property
    def radius_summary(self) -> str:
        return RadiusController.format_summary(self.radius)
