"""
InteractionRouter — reconciliation core of the geofence editor.

Responsibilities:
- Accept edit intents from three input modalities:
    text:    address field (debounced, resolved through AddressResolver)
    pointer: map click / marker drag
    numeric: latitude, longitude and radius fields or slider
- Be the only caller of CoordinateStore / RadiusController mutators.
- Publish one immutable GeofenceState snapshot per accepted intent to every
  listener and to the map surface.
- Never let an error escape into the UI layer: failures become part of the
  published snapshot.

All intent methods are synchronous and must be called from the event loop
thread; the geocode lookup is the only suspension point.
"""
from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
from typing import Callable, Protocol

from .config import GeofenceConfig
from .const import MSG_TILE_ERROR
from .coordinate_store import CoordinateStore
from .errors import GeocodeError, InvalidInputError, StaleResponseError
from .models import IDLE, PENDING, RESOLVED, Coordinate, Resolution, ResolutionStatus
from .radius import RadiusController
from .resolver import AddressResolver
from .state import GeofenceState

_LOGGER = logging.getLogger(__name__)

StateListener = Callable[[GeofenceState], None]


class RouterState(enum.Enum):
    IDLE = "idle"
    AWAITING_GEOCODE = "awaiting_geocode"


class MapSurface(Protocol):
    """Rendering sink driven by the router after every publish."""

    def render(self, center: Coordinate, radius: float) -> None: ...


class InteractionRouter:
    """
    Single-writer state machine keeping address, coordinate and radius consistent.

    Whichever intent is processed last wins. The one exception is geocoding,
    where completion order may differ from issue order; stale completions are
    dropped by request id inside AddressResolver.
    """

    def __init__(
        self,
        resolver: AddressResolver,
        config: GeofenceConfig | None = None,
        *,
        coordinate: Coordinate | None = None,
        address: str = "",
        map_surface: MapSurface | None = None,
    ) -> None:
        self.config = config or GeofenceConfig()
        self.resolver = resolver
        self._coordinates = CoordinateStore(
            initial=coordinate, default_center=self.config.default_center
        )
        self._radius = RadiusController(
            min_radius=self.config.min_radius,
            max_radius=self.config.max_radius,
            initial_radius=self.config.initial_radius,
        )
        self._map_surface = map_surface
        self._listeners: list[StateListener] = []

        self._state = RouterState.IDLE
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._geocode_tasks: set[asyncio.Task] = set()

        self.data = GeofenceState(
            coordinate=self._coordinates.current(),
            radius=self._radius.current(),
            address_query=address or "",
            default_center=self.config.default_center,
        )

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def debounce_pending(self) -> bool:
        return self._debounce_handle is not None

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a snapshot callback; returns a function that unregisters it."""
        self._listeners.append(listener)

        def remove_listener() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove_listener

    # ------------------------------------------------------------------
    # Text intents
    # ------------------------------------------------------------------

    def set_address_query(self, text: str) -> None:
        """
        Echo the new address text immediately and (re)start the debounce timer.

        A lookup still in flight for the previous text is superseded, since it
        answers a query the user is no longer looking at.
        """
        text = "" if text is None else str(text)
        self._cancel_debounce()
        self._supersede_geocode()

        if not text.strip():
            self._publish(dataclasses.replace(
                self.data, address_query=text, resolution=IDLE, notice=None
            ))
            return

        resolution = IDLE if self.data.is_pending else self.data.resolution
        self._publish(dataclasses.replace(
            self.data, address_query=text, resolution=resolution, notice=None
        ))
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(
            self.config.debounce_delay, self._on_debounce_fired
        )

    def geocode_now(self) -> None:
        """Resolve the current address text right away, skipping the debounce window."""
        self._cancel_debounce()
        self._start_geocode(self.data.address_query)

    async def async_start(self) -> None:
        """Geocode the initial address if the router was created without a coordinate."""
        if self.data.coordinate is None and self.data.address_query.strip():
            self._start_geocode(self.data.address_query)

    # ------------------------------------------------------------------
    # Pointer intents
    # ------------------------------------------------------------------

    def click(self, lat: float, lng: float) -> None:
        """Map click, already translated to lat/lng by the map surface."""
        self._set_coordinate_now("click", lambda: self._coordinates.set_coordinate(lat, lng))

    def drag(self, lat: float, lng: float) -> None:
        """Intermediate marker position; callers should throttle these."""
        self._set_coordinate_now("drag", lambda: self._coordinates.set_coordinate(lat, lng))

    def drag_end(self, lat: float, lng: float) -> None:
        self._set_coordinate_now("drag_end", lambda: self._coordinates.set_coordinate(lat, lng))

    # ------------------------------------------------------------------
    # Numeric intents
    # ------------------------------------------------------------------

    def set_latitude(self, value) -> None:
        self._set_coordinate_now("latitude", lambda: self._coordinates.set_latitude(value))

    def set_longitude(self, value) -> None:
        self._set_coordinate_now("longitude", lambda: self._coordinates.set_longitude(value))

    def set_radius(self, value) -> None:
        try:
            outcome = self._radius.set_radius(value)
        except InvalidInputError as exc:
            _LOGGER.warning("Rejected radius input %r: %s", value, exc)
            self._publish(dataclasses.replace(self.data, notice=str(exc)))
            return

        if outcome.clamped:
            _LOGGER.warning("Radius input %r clamped to %s", value, outcome.value)
        self._publish(dataclasses.replace(self.data, radius=outcome.value, notice=outcome.note))

    # Slider values are pre-constrained by the UI; the controller still clamps.
    set_radius_slider = set_radius

    # ------------------------------------------------------------------
    # Map surface events
    # ------------------------------------------------------------------

    def tile_load_error(self) -> None:
        _LOGGER.warning("Map surface reported a tile load error")
        self._publish(dataclasses.replace(self.data, map_error=MSG_TILE_ERROR))

    def clear_map_error(self) -> None:
        if self.data.map_error is not None:
            self._publish(dataclasses.replace(self.data, map_error=None))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def async_block_till_done(self) -> None:
        """Wait until every outstanding geocode task has settled."""
        while self._geocode_tasks:
            await asyncio.gather(*list(self._geocode_tasks), return_exceptions=True)

    async def async_shutdown(self) -> None:
        """Cancel timers and lookups and close the geocoder if it owns resources."""
        self._cancel_debounce()
        for task in list(self._geocode_tasks):
            task.cancel()
        if self._geocode_tasks:
            await asyncio.gather(*self._geocode_tasks, return_exceptions=True)
        self._geocode_tasks.clear()
        self._state = RouterState.IDLE
        if self.data.is_pending:
            self._publish(dataclasses.replace(self.data, resolution=IDLE))

        close = getattr(self.resolver.geocoder, "close", None)
        if close is not None:
            await close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_coordinate_now(self, source: str, apply) -> None:
        """Apply a direct coordinate edit; it supersedes any pending text resolution."""
        try:
            outcome = apply()
        except InvalidInputError as exc:
            _LOGGER.warning("Rejected %s input: %s", source, exc)
            self._publish(dataclasses.replace(self.data, notice=str(exc)))
            return

        self._cancel_debounce()
        self._supersede_geocode()
        if outcome.clamped:
            _LOGGER.warning("%s input clamped: %s", source, outcome.note)
        _LOGGER.debug("Coordinate set by %s to (%.6f, %.6f)",
                      source, outcome.value.latitude, outcome.value.longitude)
        self._publish(dataclasses.replace(
            self.data, coordinate=outcome.value, resolution=IDLE, notice=outcome.note
        ))

    def _on_debounce_fired(self) -> None:
        self._debounce_handle = None
        self._start_geocode(self.data.address_query)

    def _start_geocode(self, query: str) -> None:
        self._state = RouterState.AWAITING_GEOCODE
        request_id = self.resolver.next_request_id()
        self._publish(dataclasses.replace(self.data, resolution=PENDING, notice=None))
        task = asyncio.ensure_future(self._run_geocode(query, request_id))
        self._geocode_tasks.add(task)
        task.add_done_callback(self._geocode_tasks.discard)

    async def _run_geocode(self, query: str, request_id: int) -> None:
        try:
            result = await self.resolver.resolve(query, request_id)
        except StaleResponseError:
            return
        except GeocodeError as exc:
            _LOGGER.warning("Geocoding %r failed (%s): %s", query, exc.reason.value, exc)
            self._state = RouterState.IDLE
            self._publish(dataclasses.replace(
                self.data,
                resolution=Resolution(ResolutionStatus.FAILED, exc.message, exc.reason),
            ))
            return

        outcome = self._coordinates.set_coordinate(
            result.coordinate.latitude, result.coordinate.longitude
        )
        self._state = RouterState.IDLE
        self._publish(dataclasses.replace(
            self.data, coordinate=outcome.value, resolution=RESOLVED, notice=outcome.note
        ))

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _supersede_geocode(self) -> None:
        if self._state is RouterState.AWAITING_GEOCODE:
            self.resolver.invalidate()
            self._state = RouterState.IDLE

    def _publish(self, new_data: GeofenceState) -> None:
        """Store the snapshot and push it to listeners and the map surface."""
        self.data = new_data
        for listener in list(self._listeners):
            try:
                listener(new_data)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.error("Geofence state listener %r failed: %s", listener, exc)

        if self._map_surface is not None:
            try:
                self._map_surface.render(new_data.center, new_data.radius)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.error("Map surface render failed: %s", exc)
