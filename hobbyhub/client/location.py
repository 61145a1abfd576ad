"""
Device location: permission state, current fix, last-known fix, and pushes
to the backend.

Permission moves ``idle -> requesting -> granted | denied``. Only an explicit
``request_permission()`` moves ``denied`` back to ``requesting``; ``granted``
stays granted for the session.

``watch()`` polls the provider while at least one watcher is registered.
Each fix that moved far enough is persisted, handed to the watchers and
pushed to the backend unless sharing is switched off. The last fix is
cached for 15 minutes.
"""
import asyncio
import enum
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from hobbyhub.client.api import HobbyHubApiClient
from hobbyhub.client.storage import KeyValueStore
from hobbyhub.core.exceptions import (
    HobbyHubException,
    InvalidStateTransition,
    PermissionDenied,
    PositionUnavailable,
)
from hobbyhub.schemas.geo import Coordinate
from hobbyhub.schemas.user import LocationSettingsUpdate
from hobbyhub.services.geo import distance_km

logger = logging.getLogger(__name__)

LAST_LOCATION_KEY = "user:last-location"
LOCATION_EXPIRY_KEY = "user:location-expiry"
LOCATION_CACHE_SECONDS = 15 * 60
DEFAULT_GEOFENCE_RADIUS_M = 5000


class PermissionStatus(str, enum.Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    GRANTED = "granted"
    DENIED = "denied"


_TRANSITIONS = {
    PermissionStatus.IDLE: {PermissionStatus.REQUESTING},
    PermissionStatus.REQUESTING: {PermissionStatus.GRANTED, PermissionStatus.DENIED},
    PermissionStatus.DENIED: {PermissionStatus.REQUESTING},
    PermissionStatus.GRANTED: set(),
}


@runtime_checkable
class LocationProvider(Protocol):
    """Platform location API. ``current_position`` may raise ``asyncio.TimeoutError``."""

    async def request_permission(self) -> bool: ...

    async def current_position(self) -> Coordinate: ...


WatchCallback = Callable[[Coordinate], None]


class LocationWatch:
    """Handle returned by ``LocationService.watch``."""

    def __init__(self, service: "LocationService", watch_id: int):
        self._service = service
        self._watch_id = watch_id

    @property
    def active(self) -> bool:
        return self._watch_id in self._service._watchers

    def stop(self) -> None:
        """Unregister the callback. The polling loop ends with the last watcher."""
        self._service._remove_watcher(self._watch_id)


class LocationService:
    def __init__(
        self,
        provider: LocationProvider,
        store: KeyValueStore,
        api: Optional[HobbyHubApiClient] = None,
        position_timeout_seconds: float = 15.0,
        watch_interval_seconds: float = 30.0,
        watch_min_distance_m: float = 50.0,
        cache_seconds: float = LOCATION_CACHE_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.provider = provider
        self.store = store
        self.api = api
        self.position_timeout_seconds = position_timeout_seconds
        self.watch_interval_seconds = watch_interval_seconds
        self.watch_min_distance_m = watch_min_distance_m
        self.cache_seconds = cache_seconds
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._status = PermissionStatus.IDLE
        self._last_position: Optional[Coordinate] = None
        self.sharing_settings: Optional[LocationSettingsUpdate] = None

        self._watchers: Dict[int, WatchCallback] = {}
        self._next_watch_id = 0
        self._watch_task: Optional[asyncio.Task] = None

    @property
    def status(self) -> PermissionStatus:
        return self._status

    @property
    def last_position(self) -> Optional[Coordinate]:
        return self._last_position

    @property
    def watching(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    def _transition(self, target: PermissionStatus) -> None:
        if target not in _TRANSITIONS[self._status]:
            raise InvalidStateTransition(self._status.value, target.value)
        logger.debug(f"Location permission {self._status.value} -> {target.value}")
        self._status = target

    async def request_permission(self) -> bool:
        """
        Ask the platform for permission.

        Returns:
            True when granted. Calling again once granted is a no-op.

        Raises:
            InvalidStateTransition: when a request is already in flight
        """
        if self._status is PermissionStatus.GRANTED:
            return True

        self._transition(PermissionStatus.REQUESTING)
        try:
            granted = bool(await self.provider.request_permission())
        except Exception as e:
            logger.warning(f"Location permission request failed: {e}")
            granted = False

        self._transition(PermissionStatus.GRANTED if granted else PermissionStatus.DENIED)
        return granted

    async def get_current_position(self) -> Coordinate:
        """
        Fresh fix from the platform, persisted as the last known position.

        Raises:
            PermissionDenied: unless permission is granted
            PositionUnavailable: when the provider fails or exceeds the timeout
        """
        if self._status is not PermissionStatus.GRANTED:
            raise PermissionDenied()

        try:
            coordinate = await asyncio.wait_for(
                self.provider.current_position(),
                timeout=self.position_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise PositionUnavailable(
                f"Location provider timed out after {self.position_timeout_seconds}s"
            ) from e
        except Exception as e:
            raise PositionUnavailable(details={"reason": str(e)}) from e

        await self.persist_last_position(coordinate)
        return coordinate

    async def persist_last_position(self, coordinate: Coordinate, timestamp: Optional[datetime] = None) -> None:
        timestamp = timestamp or self._clock()
        record = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "timestamp": timestamp.isoformat(),
        }
        await self.store.set(LAST_LOCATION_KEY, json.dumps(record))
        expires = timestamp + timedelta(seconds=self.cache_seconds)
        await self.store.set(LOCATION_EXPIRY_KEY, expires.isoformat())
        self._last_position = coordinate

    async def load_last_position(self) -> Optional[Coordinate]:
        """Last persisted fix of any age, used to seed the map before a fresh fix arrives."""
        raw = await self.store.get(LAST_LOCATION_KEY)
        if raw is None:
            return None
        try:
            record = json.loads(raw)
            coordinate = Coordinate(latitude=record["latitude"], longitude=record["longitude"])
        except (ValueError, KeyError, TypeError, PydanticValidationError) as e:
            logger.warning(f"Discarding corrupt last location: {e}")
            return None
        self._last_position = coordinate
        return coordinate

    async def cached_position(self) -> Optional[Coordinate]:
        """The persisted fix while it is younger than ``cache_seconds``, else None."""
        raw = await self.store.get(LOCATION_EXPIRY_KEY)
        if raw is None:
            return None
        try:
            expires = datetime.fromisoformat(raw)
        except (TypeError, ValueError):
            logger.warning(f"Discarding corrupt location expiry: {raw!r}")
            return None
        if expires <= self._clock():
            return None
        return await self.load_last_position()

    async def current_position_or_last(self, force_refresh: bool = False) -> Optional[Coordinate]:
        """
        Position for the UI: an unexpired cached fix, else a fresh fix, else
        the last persisted fix of any age. None when there is nothing at all.
        """
        if not force_refresh and self._status is PermissionStatus.GRANTED:
            cached = await self.cached_position()
            if cached is not None:
                return cached
        try:
            return await self.get_current_position()
        except (PermissionDenied, PositionUnavailable) as e:
            logger.info(f"Falling back to last known position: {e.message}")
        return await self.load_last_position()

    async def push_position(self, coordinate: Coordinate) -> bool:
        """Send a fix to the backend. Background work: failures are logged, never raised."""
        if self.api is None:
            return False
        try:
            await self.api.update_location(coordinate)
        except HobbyHubException as e:
            logger.warning(f"Failed to push location: {e.message}", extra={"error_code": e.error_code.value})
            return False
        return True

    def watch(self, callback: WatchCallback) -> LocationWatch:
        """
        Register ``callback`` for position updates and start polling if needed.
        Must be called from a running event loop.
        """
        watch_id = self._next_watch_id
        self._next_watch_id += 1
        self._watchers[watch_id] = callback
        if not self.watching:
            self._watch_task = asyncio.get_running_loop().create_task(self._watch_loop())
        return LocationWatch(self, watch_id)

    def _remove_watcher(self, watch_id: int) -> None:
        self._watchers.pop(watch_id, None)
        if not self._watchers and self._watch_task is not None:
            self._watch_task.cancel()
            self._watch_task = None

    async def stop_watching(self) -> None:
        """Drop every watcher and wait for the polling loop to finish."""
        self._watchers.clear()
        task, self._watch_task = self._watch_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _notify(self, coordinate: Coordinate) -> None:
        for callback in list(self._watchers.values()):
            try:
                callback(coordinate)
            except Exception:
                logger.exception("Location watcher callback failed")

    def _sharing_enabled(self) -> bool:
        return self.sharing_settings is None or self.sharing_settings.is_location_sharing_enabled

    async def _watch_loop(self) -> None:
        if self._status is PermissionStatus.IDLE:
            await self.request_permission()

        emitted: Optional[Coordinate] = None
        while self._watchers:
            try:
                coordinate = await self.get_current_position()
            except PermissionDenied:
                logger.warning("Location watch stopped: permission not granted")
                return
            except PositionUnavailable as e:
                logger.info(f"Location watch missed a fix: {e.message}")
            else:
                if emitted is None or distance_km(emitted, coordinate) * 1000 >= self.watch_min_distance_m:
                    emitted = coordinate
                    self._notify(coordinate)
                    if self._sharing_enabled():
                        await self.push_position(coordinate)
            await asyncio.sleep(self.watch_interval_seconds)

    async def update_sharing_settings(
        self,
        enabled: bool,
        radius_meters: Optional[int] = None,
    ) -> LocationSettingsUpdate:
        """
        Change location sharing and forward it to the backend.

        Errors from the backend propagate to the caller.
        """
        settings = LocationSettingsUpdate(
            is_location_sharing_enabled=enabled,
            geofence_radius=radius_meters if radius_meters is not None else DEFAULT_GEOFENCE_RADIUS_M,
        )
        if self.api is not None:
            await self.api.update_location_settings(settings)
        self.sharing_settings = settings
        return settings

    def distance_to(self, coordinate: Coordinate) -> Optional[float]:
        if self._last_position is None:
            return None
        return distance_km(self._last_position, coordinate)
