"""
Hobby API endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hobbyhub.api.params import nearby_query
from hobbyhub.core.db import get_db
from hobbyhub.core.dependencies import get_current_user
from hobbyhub.models.hobby import HobbyCategory
from hobbyhub.models.user import User
from hobbyhub.schemas.base import Envelope, ListEnvelope
from hobbyhub.schemas.geo import NearbyQuery
from hobbyhub.schemas.hobby import HobbyCreate, HobbyRead, NearbyHobbyRead
from hobbyhub.services.hobby_service import HobbyService
from hobbyhub.services.nearby_service import NearbyService

router = APIRouter(prefix="/api/v1/hobbies", tags=["hobbies"])


@router.get("/nearby", response_model=ListEnvelope[NearbyHobbyRead])
async def get_nearby_hobbies(
    query: NearbyQuery = Depends(nearby_query),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """Hobbies with events inside the radius, ordered by their closest event."""
    data = [
        NearbyHobbyRead(
            id=entry.hobby.id,
            name=entry.hobby.name,
            slug=entry.hobby.slug,
            description=entry.hobby.description,
            category=entry.hobby.category,
            popularity=entry.hobby.popularity,
            distance=round(entry.distance, 3),
            events_nearby=entry.events_nearby,
            nearest_event_id=entry.nearest_event_id,
        )
        for entry in NearbyService(db).find_hobbies(query, limit=limit)
    ]
    return ListEnvelope(count=len(data), data=data)


@router.get("", response_model=ListEnvelope[HobbyRead])
async def list_hobbies(
    category: Optional[HobbyCategory] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    hobbies = HobbyService(db).list_hobbies(category.value if category else None, limit)
    data: List[HobbyRead] = [HobbyRead.model_validate(h) for h in hobbies]
    return ListEnvelope(count=len(data), data=data)


@router.post("", response_model=Envelope[HobbyRead], status_code=status.HTTP_201_CREATED)
async def create_hobby(
    payload: HobbyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    hobby = HobbyService(db).create_hobby(payload, creator_id=current_user.id)
    return Envelope(data=HobbyRead.model_validate(hobby))
