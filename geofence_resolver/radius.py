"""
RadiusController: canonical holder of the geofence radius, plus derived metrics.

Areas use the flat-disc approximation (pi * r^2). That is exact enough for
event catchment radii of a few kilometres and is not geodesically corrected.
"""
from __future__ import annotations

import logging
import math

from .const import DEFAULT_MAX_RADIUS, DEFAULT_MIN_RADIUS, DEFAULT_RADIUS, MSG_RADIUS_CLAMPED
from .models import ClampResult, clamp, to_finite_float

_LOGGER = logging.getLogger(__name__)


class RadiusController:
    """Holds the current radius (meters) clamped to [min_radius, max_radius]."""

    def __init__(
        self,
        min_radius: float = DEFAULT_MIN_RADIUS,
        max_radius: float = DEFAULT_MAX_RADIUS,
        initial_radius: float = DEFAULT_RADIUS,
    ) -> None:
        if min_radius > max_radius:
            raise ValueError(f"min_radius {min_radius} is larger than max_radius {max_radius}")
        self.min_radius = float(min_radius)
        self.max_radius = float(max_radius)
        self._radius = clamp(to_finite_float(initial_radius, "radius"), self.min_radius, self.max_radius)

    def current(self) -> float:
        return self._radius

    def set_radius(self, value) -> ClampResult[float]:
        raw = to_finite_float(value, "radius")
        self._radius = clamp(raw, self.min_radius, self.max_radius)
        if self._radius != raw:
            note = MSG_RADIUS_CLAMPED.format(min=self.min_radius, max=self.max_radius)
            _LOGGER.debug("Radius %s clamped to %s", raw, self._radius)
            return ClampResult(self._radius, clamped=True, note=note)
        return ClampResult(self._radius)

    # ------------------------------------------------------------------
    # Derived metrics
    # ------------------------------------------------------------------

    @staticmethod
    def distance_km(radius: float) -> float:
        return radius / 1000

    @staticmethod
    def area_square_meters(radius: float) -> float:
        return math.pi * radius * radius

    @classmethod
    def area_hectares(cls, radius: float) -> float:
        return cls.area_square_meters(radius) / 10000

    @classmethod
    def format_summary(cls, radius: float) -> str:
        """Human readable line, e.g. 'Radius: 500 m (0.50 km) • Area ≈ 785,398 m² (78.54 ha)'."""
        return (
            f"Radius: {radius:g} m ({cls.distance_km(radius):.2f} km) • "
            f"Area ≈ {round(cls.area_square_meters(radius)):,} m² "
            f"({cls.area_hectares(radius):.2f} ha)"
        )
