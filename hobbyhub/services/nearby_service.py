"""
Nearby Service - radius queries over stored event coordinates.

Two passes: a bounding-box prefilter on the indexed latitude/longitude
columns (plain SQL, works on any dialect) and an exact haversine check in
Python. Results are sorted by ascending distance and capped.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from hobbyhub.config.settings import NearbySettings, get_settings
from hobbyhub.models.event import Event
from hobbyhub.models.hobby import Hobby
from hobbyhub.schemas.geo import Coordinate, NearbyQuery
from hobbyhub.services.geo import distance_km, enclosing_box

logger = logging.getLogger(__name__)


@dataclass
class NearbyHobby:
    hobby: Hobby
    distance: float
    events_nearby: int
    nearest_event_id: int


class NearbyService:
    """Answers "what is within N km of here" for events and hobbies."""

    def __init__(self, db: Session, settings: Optional[NearbySettings] = None):
        self.db = db
        self.settings = settings or get_settings().nearby

    def resolve_limit(self, limit: Optional[int]) -> int:
        """Default to ``default_limit``; never exceed ``max_results``."""
        if limit is None or limit <= 0:
            limit = self.settings.default_limit
        return min(limit, self.settings.max_results)

    def _candidates(self, query: NearbyQuery) -> List[Event]:
        box = enclosing_box(query.coordinate, query.radius_km)
        stmt = (
            select(Event)
            .options(joinedload(Event.hobby))
            .where(Event.latitude.between(box.min_lat, box.max_lat))
        )
        # A box clamped at the antimeridian would drop points just across it.
        if not box.touches_antimeridian:
            stmt = stmt.where(Event.longitude.between(box.min_lon, box.max_lon))

        if query.category_filter:
            needle = query.category_filter.strip().lower()
            stmt = stmt.join(Event.hobby).where(
                (func.lower(Hobby.category) == needle) | (func.lower(Hobby.name) == needle)
            )

        return list(self.db.execute(stmt).unique().scalars())

    def _within_radius(self, query: NearbyQuery) -> List[Tuple[Event, float]]:
        candidates = self._candidates(query)

        matches = []
        for event in candidates:
            distance = distance_km(
                query.coordinate,
                Coordinate(latitude=event.latitude, longitude=event.longitude),
            )
            if distance <= query.radius_km:
                matches.append((event, distance))

        matches.sort(key=lambda pair: (pair[1], pair[0].id))

        logger.debug(
            f"Nearby events: {len(candidates)} candidates, {len(matches)} within {query.radius_km} km"
        )
        return matches

    def find_events(self, query: NearbyQuery, limit: Optional[int] = None) -> List[Tuple[Event, float]]:
        """
        Events within ``query.radius_km`` of ``query.coordinate``.

        Args:
            query: Center, radius and optional hobby category/name filter
            limit: Maximum number of results (clamped to the configured maximum)

        Returns:
            ``(event, distance_km)`` pairs, nearest first
        """
        return self._within_radius(query)[: self.resolve_limit(limit)]

    def find_hobbies(self, query: NearbyQuery, limit: Optional[int] = None) -> List[NearbyHobby]:
        """Hobbies with at least one event inside the radius, ordered by their nearest event."""
        grouped: Dict[int, NearbyHobby] = {}
        for event, distance in self._within_radius(query):
            entry = grouped.get(event.hobby_id)
            if entry is None:
                grouped[event.hobby_id] = NearbyHobby(
                    hobby=event.hobby,
                    distance=distance,
                    events_nearby=1,
                    nearest_event_id=event.id,
                )
            else:
                entry.events_nearby += 1

        hobbies = sorted(grouped.values(), key=lambda h: (h.distance, h.hobby.id))
        return hobbies[: self.resolve_limit(limit)]
