"""
User location endpoints. Both require a bearer token.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hobbyhub.core.db import get_db
from hobbyhub.core.dependencies import get_current_user
from hobbyhub.models.user import User
from hobbyhub.schemas.base import Message
from hobbyhub.schemas.user import LocationSettingsUpdate, LocationUpdate
from hobbyhub.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/location", response_model=Message)
async def update_location(
    payload: LocationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    UserService(db).update_location(current_user, payload)
    return Message(message="Location updated successfully")


@router.post("/location/settings", response_model=Message)
async def update_location_settings(
    payload: LocationSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = UserService(db).update_location_settings(current_user, payload)
    logger.info(
        f"Location sharing {'enabled' if user.location_sharing_enabled else 'disabled'} for user {user.id}",
        extra={"geofence_radius": user.geofence_radius},
    )
    return Message(message="Location settings updated successfully")
