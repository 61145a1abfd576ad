"""
Event API endpoints - nearby discovery plus the minimal create/read needed to feed it.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hobbyhub.api.params import nearby_query
from hobbyhub.core.db import get_db
from hobbyhub.core.dependencies import get_current_user, get_geocoding_client
from hobbyhub.models.user import User
from hobbyhub.schemas.base import Envelope, ListEnvelope
from hobbyhub.schemas.event import EventCreate, EventRead, NearbyEventRead, PointLocation
from hobbyhub.schemas.geo import NearbyQuery
from hobbyhub.services.event_service import EventService
from hobbyhub.services.geocoding import GeocodingClient
from hobbyhub.services.nearby_service import NearbyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/events", tags=["events"])


# Declared before "/{event_id}" so "nearby" is not parsed as an id.
@router.get("/nearby", response_model=ListEnvelope[NearbyEventRead])
async def get_nearby_events(
    query: NearbyQuery = Depends(nearby_query),
    limit: Optional[int] = Query(None, ge=1, description="Maximum results (default 50)"),
    db: Session = Depends(get_db),
):
    """
    Events within ``radius`` km of the given point, nearest first.

    - **latitude**, **longitude**: search center (required)
    - **radius**: km, default 10
    - **hobbyType**: optional hobby category or name filter
    - **limit**: capped at the configured maximum
    """
    matches = NearbyService(db).find_events(query, limit=limit)
    data = [
        NearbyEventRead(
            id=event.id,
            title=event.title,
            description=event.description,
            distance=round(distance, 3),
            location=PointLocation.of(event.latitude, event.longitude, event.formatted_address),
        )
        for event, distance in matches
    ]
    return ListEnvelope(count=len(data), data=data)


@router.post("", response_model=Envelope[EventRead], status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
):
    event = await EventService(db, geocoder).create_event(current_user.id, payload)
    return Envelope(data=EventRead.from_model(event))


@router.get("/{event_id}", response_model=Envelope[EventRead])
async def get_event(event_id: int, db: Session = Depends(get_db)):
    event = EventService(db).get_event(event_id)
    return Envelope(data=EventRead.from_model(event))
