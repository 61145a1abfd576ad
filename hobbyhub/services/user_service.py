"""
User Service - registration, credential checks and location updates.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from hobbyhub.config.settings import get_settings
from hobbyhub.core.exceptions import AuthenticationError, ConflictError
from hobbyhub.core.security import hash_password, verify_password
from hobbyhub.models.user import User
from hobbyhub.schemas.user import LocationSettingsUpdate, LocationUpdate, UserCreate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def register(self, data: UserCreate) -> User:
        """
        Raises:
            ConflictError: if the email or username is taken
        """
        email = data.email.lower()
        for field, column, value in (("email", User.email, email), ("username", User.username, data.username)):
            taken = self.db.execute(select(User.id).where(column == value).limit(1)).first()
            if taken is not None:
                raise ConflictError(f"User with that {field} already exists", details={"field": field})

        user = User(
            username=data.username,
            email=email,
            name=data.name,
            hashed_password=hash_password(data.password),
            geofence_radius=get_settings().nearby.default_geofence_radius_m,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Raises:
            AuthenticationError: for an unknown email or a wrong password
        """
        user = self.db.execute(
            select(User).where(User.email == email.lower())
        ).scalar_one_or_none()
        if user is None or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid credentials")
        return user

    def update_location(self, user: User, data: LocationUpdate) -> User:
        user.latitude = data.latitude
        user.longitude = data.longitude
        user.last_location_update = data.timestamp or datetime.now(timezone.utc)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.debug(f"Location updated for user {user.id}")
        return user

    def update_location_settings(self, user: User, data: LocationSettingsUpdate) -> User:
        user.location_sharing_enabled = data.is_location_sharing_enabled
        user.geofence_radius = data.geofence_radius or get_settings().nearby.default_geofence_radius_m
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
