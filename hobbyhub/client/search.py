"""
Debounced nearby search combining local map markers with geocoded places.

Each ``set_query`` cancels the pending debounce timer and bumps a generation
counter. A search that was already sending its geocoding request is not
aborted; when it finishes under an old generation its results are dropped.
Local marker matches are always published, geocoding failures only empty the
location part.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol, Set, Union

from hobbyhub.config.settings import SearchSettings
from hobbyhub.schemas.geo import Coordinate
from hobbyhub.schemas.search import LocationResult, MapMarker, MarkerResult

logger = logging.getLogger(__name__)

SearchResultItem = Union[MarkerResult, LocationResult]


class Geocoder(Protocol):
    async def forward_geocode(self, query: str, near: Optional[Coordinate] = None) -> List[LocationResult]: ...


@dataclass(frozen=True)
class LocationSelectEvent:
    coordinate: Coordinate
    description: str


def merge_results(markers: List[MarkerResult], locations: List[LocationResult]) -> List[SearchResultItem]:
    """Markers first, then locations, keeping the first occurrence of each id."""
    seen = set()
    merged: List[SearchResultItem] = []
    for item in [*markers, *locations]:
        if item.id in seen:
            continue
        seen.add(item.id)
        merged.append(item)
    return merged


class NearbySearchAggregator:
    def __init__(
        self,
        geocoder: Geocoder,
        markers: Iterable[MapMarker] = (),
        on_results: Optional[Callable[[List[SearchResultItem]], None]] = None,
        on_location_select: Optional[Callable[[LocationSelectEvent], None]] = None,
        debounce_seconds: float = 0.3,
        min_query_length: int = 3,
        near: Optional[Coordinate] = None,
    ):
        self.geocoder = geocoder
        self.on_results = on_results
        self.on_location_select = on_location_select
        self.debounce_seconds = debounce_seconds
        self.min_query_length = min_query_length
        self.near = near

        self.query = ""
        self.results: List[SearchResultItem] = []
        self.loading = False

        self._markers: List[MapMarker] = list(markers)
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, geocoder: Geocoder, settings: SearchSettings, **kwargs) -> "NearbySearchAggregator":
        return cls(
            geocoder,
            debounce_seconds=settings.debounce_seconds,
            min_query_length=settings.min_query_length,
            **kwargs,
        )

    @property
    def generation(self) -> int:
        return self._generation

    def set_markers(self, markers: Iterable[MapMarker]) -> None:
        self._markers = list(markers)

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def _publish(self, results: List[SearchResultItem]) -> None:
        self.results = results
        if self.on_results is not None:
            self.on_results(list(results))

    def _clear(self) -> None:
        self.loading = False
        self._publish([])

    def _is_searchable(self, text: str) -> bool:
        return len(text.strip()) >= self.min_query_length

    def set_query(self, text: str) -> None:
        """Record new input. Must be called from a running event loop."""
        self.query = text
        self._cancel_pending()
        self._generation += 1

        if not self._is_searchable(text):
            self._clear()
            return

        self.loading = True
        self._pending = asyncio.get_running_loop().create_task(
            self._debounced(self._generation, text.strip())
        )

    async def _debounced(self, generation: int, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Past the timer: detach so a newer keystroke cannot cancel the request.
        task = asyncio.current_task()
        if self._pending is task:
            self._pending = None
        self._in_flight.add(task)
        try:
            await self._run(generation, text)
        finally:
            self._in_flight.discard(task)

    async def _run(self, generation: int, text: str) -> Optional[List[SearchResultItem]]:
        needle = text.lower()
        marker_hits = [MarkerResult.from_marker(m) for m in self._markers if m.matches(needle)]

        try:
            location_hits = list(await self.geocoder.forward_geocode(text, near=self.near))
        except Exception as e:
            logger.warning(f"Geocoding failed for '{text}', showing local matches only: {e}")
            location_hits = []

        if generation != self._generation:
            logger.debug(f"Dropping stale results for '{text}' (generation {generation} < {self._generation})")
            return None

        merged = merge_results(marker_hits, location_hits)
        self.loading = False
        self._publish(merged)
        return merged

    async def search_now(self, text: str) -> List[SearchResultItem]:
        """Run one search immediately, skipping the debounce."""
        self.query = text
        self._cancel_pending()
        self._generation += 1

        if not self._is_searchable(text):
            self._clear()
            return []

        self.loading = True
        merged = await self._run(self._generation, text.strip())
        return merged if merged is not None else []

    def select(self, result: SearchResultItem) -> LocationSelectEvent:
        event = LocationSelectEvent(coordinate=result.coordinate, description=result.label)
        if self.on_location_select is not None:
            self.on_location_select(event)
        return event

    def close(self) -> None:
        """Drop the pending timer and make any in-flight response stale."""
        self._cancel_pending()
        self._generation += 1
        self.loading = False

    async def wait_until_idle(self) -> None:
        """Wait for the pending timer and any in-flight searches to finish."""
        while True:
            tasks = [t for t in (self._pending, *self._in_flight) if t is not None and not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)
