"""Configuration for the geofence resolver, validated with voluptuous."""
from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any

import voluptuous as vol
from dotenv import load_dotenv

from .const import (
    DEBOUNCE_DELAY,
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_MAX_RADIUS,
    DEFAULT_MIN_RADIUS,
    DEFAULT_RADIUS,
    DEFAULT_USER_AGENT,
    GEOCODE_TIMEOUT,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    NOMINATIM_MIN_INTERVAL,
    NOMINATIM_URL,
)
from .models import Coordinate

_LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "GEOFENCE_"

positive_float = vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))
non_negative_float = vol.All(vol.Coerce(float), vol.Range(min=0))
non_empty_string = vol.All(str, vol.Length(min=1))


def _radius_bounds(data: dict) -> dict:
    if data["min_radius"] > data["max_radius"]:
        raise vol.Invalid("min_radius must not be larger than max_radius", path=["min_radius"])
    return data


CONFIG_SCHEMA = vol.Schema(
    vol.All(
        {
            vol.Required("min_radius", default=DEFAULT_MIN_RADIUS): positive_float,
            vol.Required("max_radius", default=DEFAULT_MAX_RADIUS): positive_float,
            vol.Required("initial_radius", default=DEFAULT_RADIUS): positive_float,
            vol.Required("debounce_delay", default=DEBOUNCE_DELAY): non_negative_float,
            vol.Required("geocode_timeout", default=GEOCODE_TIMEOUT): positive_float,
            vol.Required("default_latitude", default=DEFAULT_LATITUDE): vol.All(
                vol.Coerce(float), vol.Range(min=MIN_LATITUDE, max=MAX_LATITUDE)
            ),
            vol.Required("default_longitude", default=DEFAULT_LONGITUDE): vol.All(
                vol.Coerce(float), vol.Range(min=MIN_LONGITUDE, max=MAX_LONGITUDE)
            ),
            vol.Required("nominatim_url", default=NOMINATIM_URL): vol.Url(),
            vol.Required("user_agent", default=DEFAULT_USER_AGENT): non_empty_string,
            vol.Required("accept_language", default=DEFAULT_ACCEPT_LANGUAGE): str,
            vol.Required("min_request_interval", default=NOMINATIM_MIN_INTERVAL): non_negative_float,
        },
        _radius_bounds,
    )
)


@dataclasses.dataclass(frozen=True)
class GeofenceConfig:
    """Validated resolver settings. Build with from_dict() or from_env()."""

    min_radius: float = DEFAULT_MIN_RADIUS
    max_radius: float = DEFAULT_MAX_RADIUS
    initial_radius: float = DEFAULT_RADIUS
    debounce_delay: float = DEBOUNCE_DELAY
    geocode_timeout: float = GEOCODE_TIMEOUT
    default_latitude: float = DEFAULT_LATITUDE
    default_longitude: float = DEFAULT_LONGITUDE
    nominatim_url: str = NOMINATIM_URL
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    min_request_interval: float = NOMINATIM_MIN_INTERVAL

    @property
    def default_center(self) -> Coordinate:
        return Coordinate(self.default_latitude, self.default_longitude)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None = None) -> GeofenceConfig:
        """Validate data against CONFIG_SCHEMA; raises vol.MultipleInvalid on bad input."""
        return cls(**CONFIG_SCHEMA(dict(data or {})))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> GeofenceConfig:
        """
        Build a config from GEOFENCE_* variables, e.g. GEOFENCE_MAX_RADIUS=8000.

        A .env file in the working directory is loaded first when reading the
        real process environment.
        """
        if environ is None:
            load_dotenv()
            environ = dict(os.environ)
        data = {}
        for field in dataclasses.fields(cls):
            key = ENV_PREFIX + field.name.upper()
            if key in environ:
                data[field.name] = environ[key]
        _LOGGER.debug("Loaded geofence config overrides from environment: %s", sorted(data))
        return cls.from_dict(data)
