"""Location and geofence resolver for the event editor."""
import logging

from .config import GeofenceConfig
from .const import VERSION
from .coordinate_store import CoordinateStore
from .errors import (
    GeocodeError,
    GeocodeErrorReason,
    GeocoderConnectionError,
    GeocoderHTTPError,
    GeofenceError,
    InvalidInputError,
    StaleResponseError,
)
from .geocoder import Geocoder, NominatimGeocoder
from .models import ClampResult, Coordinate, GeocodeResult, Resolution, ResolutionStatus
from .radius import RadiusController
from .resolver import AddressResolver
from .router import InteractionRouter, MapSurface, RouterState
from .state import GeofenceState

__all__ = [
    "VERSION",
    "AddressResolver",
    "ClampResult",
    "Coordinate",
    "CoordinateStore",
    "GeocodeError",
    "GeocodeErrorReason",
    "GeocodeResult",
    "Geocoder",
    "GeocoderConnectionError",
    "GeocoderHTTPError",
    "GeofenceConfig",
    "GeofenceError",
    "GeofenceState",
    "InteractionRouter",
    "InvalidInputError",
    "MapSurface",
    "NominatimGeocoder",
    "RadiusController",
    "Resolution",
    "ResolutionStatus",
    "RouterState",
    "StaleResponseError",
    "create_router",
]

_LOGGER = logging.getLogger(__name__)


def create_router(
    config: GeofenceConfig | None = None,
    geocoder: Geocoder | None = None,
    *,
    coordinate: Coordinate | None = None,
    address: str = "",
    map_surface: MapSurface | None = None,
) -> InteractionRouter:
    """Wire a router, its resolver and (unless one is given) a Nominatim geocoder."""
    config = config or GeofenceConfig()
    if geocoder is None:
        geocoder = NominatimGeocoder(
            base_url=config.nominatim_url,
            user_agent=config.user_agent,
            accept_language=config.accept_language,
            timeout=config.geocode_timeout,
            min_interval=config.min_request_interval,
        )
    resolver = AddressResolver(geocoder, timeout=config.geocode_timeout)
    _LOGGER.debug("Created geofence router (radius %s-%s m)", config.min_radius, config.max_radius)
    return InteractionRouter(
        resolver,
        config,
        coordinate=coordinate,
        address=address,
        map_surface=map_surface,
    )
