"""
Event Service - the minimal persistence the nearby query needs.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from hobbyhub.core.exceptions import NotFoundError
from hobbyhub.models.event import Event
from hobbyhub.models.hobby import Hobby
from hobbyhub.schemas.event import EventCreate
from hobbyhub.schemas.geo import Coordinate
from hobbyhub.services.geocoding import GeocodingClient

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, db: Session, geocoder: Optional[GeocodingClient] = None):
        self.db = db
        self.geocoder = geocoder

    async def create_event(self, organizer_id: int, data: EventCreate) -> Event:
        """
        Create an event for ``organizer_id``.

        When no address was supplied it is looked up from the coordinate; a
        failed lookup leaves it empty rather than rejecting the event.

        Raises:
            NotFoundError: if ``data.hobby_id`` does not exist
        """
        hobby = self.db.get(Hobby, data.hobby_id)
        if hobby is None:
            raise NotFoundError("Hobby not found", details={"hobby_id": data.hobby_id})

        address = data.location.formatted_address
        if not address and self.geocoder is not None:
            match = await self.geocoder.reverse_geocode(
                Coordinate(latitude=data.location.latitude, longitude=data.location.longitude)
            )
            if match is not None:
                address = match.formatted_address

        event = Event(
            title=data.title,
            description=data.description,
            hobby_id=hobby.id,
            organizer_id=organizer_id,
            event_type=data.event_type.value,
            latitude=data.location.latitude,
            longitude=data.location.longitude,
            formatted_address=address,
            start_date=data.start_date,
            end_date=data.end_date,
            capacity=data.capacity,
        )
        self.db.add(event)
        hobby.popularity = (hobby.popularity or 0) + 1
        self.db.commit()
        self.db.refresh(event)
        logger.info(f"Event {event.id} created by user {organizer_id} for hobby {hobby.id}")
        return event

    def get_event(self, event_id: int) -> Event:
        stmt = select(Event).options(joinedload(Event.hobby)).where(Event.id == event_id)
        event = self.db.execute(stmt).scalar_one_or_none()
        if event is None:
            raise NotFoundError("Event not found", details={"event_id": event_id})
        return event
