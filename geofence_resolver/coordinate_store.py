"""
CoordinateStore: canonical holder of the geofence center.

Pure validation: no I/O, no asyncio. Only InteractionRouter calls the setters.
"""
from __future__ import annotations

import logging

from .const import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    MSG_LATITUDE_CLAMPED,
    MSG_LONGITUDE_CLAMPED,
)
from .models import ClampResult, Coordinate, clamp, to_finite_float

_LOGGER = logging.getLogger(__name__)


class CoordinateStore:
    """
    Holds the current Coordinate and enforces latitude/longitude ranges.

    Out-of-range input is clamped per axis and the result is flagged; non-finite
    input raises InvalidInputError and leaves the stored value untouched.
    """

    def __init__(
        self,
        initial: Coordinate | None = None,
        default_center: Coordinate | None = None,
    ) -> None:
        self._default_center = default_center or Coordinate(DEFAULT_LATITUDE, DEFAULT_LONGITUDE)
        self._coordinate: Coordinate | None = None
        if initial is not None:
            self.set_coordinate(initial.latitude, initial.longitude)

    @property
    def default_center(self) -> Coordinate:
        return self._default_center

    def current(self) -> Coordinate | None:
        return self._coordinate

    def set_coordinate(self, lat, lng) -> ClampResult[Coordinate]:
        """Set both axes at once; either both change or neither does."""
        raw_lat = to_finite_float(lat, "latitude")
        raw_lng = to_finite_float(lng, "longitude")

        new_lat = clamp(raw_lat, MIN_LATITUDE, MAX_LATITUDE)
        new_lng = clamp(raw_lng, MIN_LONGITUDE, MAX_LONGITUDE)

        notes = []
        if new_lat != raw_lat:
            notes.append(MSG_LATITUDE_CLAMPED)
        if new_lng != raw_lng:
            notes.append(MSG_LONGITUDE_CLAMPED)

        return self._store(Coordinate(new_lat, new_lng), notes)

    def set_latitude(self, lat) -> ClampResult[Coordinate]:
        """Edit latitude only; longitude keeps its last valid value (or the default center)."""
        raw = to_finite_float(lat, "latitude")
        value = clamp(raw, MIN_LATITUDE, MAX_LATITUDE)
        base = self._coordinate or self._default_center
        notes = [MSG_LATITUDE_CLAMPED] if value != raw else []
        return self._store(Coordinate(value, base.longitude), notes)

    def set_longitude(self, lng) -> ClampResult[Coordinate]:
        """Edit longitude only; latitude keeps its last valid value (or the default center)."""
        raw = to_finite_float(lng, "longitude")
        value = clamp(raw, MIN_LONGITUDE, MAX_LONGITUDE)
        base = self._coordinate or self._default_center
        notes = [MSG_LONGITUDE_CLAMPED] if value != raw else []
        return self._store(Coordinate(base.latitude, value), notes)

    def _store(self, coordinate: Coordinate, notes: list[str]) -> ClampResult[Coordinate]:
        self._coordinate = coordinate
        if notes:
            note = "; ".join(notes)
            _LOGGER.debug("Coordinate input clamped to (%.6f, %.6f): %s",
                          coordinate.latitude, coordinate.longitude, note)
            return ClampResult(coordinate, clamped=True, note=note)
        return ClampResult(coordinate)
