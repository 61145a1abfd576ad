from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    name: str = Field(min_length=1, max_length=50)


class UserLocation(BaseModel):
    coordinates: List[float]  # [longitude, latitude]
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class UserRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: EmailStr
    name: str
    role: str = "user"
    bio: Optional[str] = None
    location: Optional[UserLocation] = None
    location_sharing_enabled: bool = Field(default=False, alias="locationSharingEnabled")
    geofence_radius: int = Field(default=5000, alias="geofenceRadius")

    @classmethod
    def from_model(cls, user) -> "UserRead":
        location = None
        if user.latitude is not None and user.longitude is not None:
            location = UserLocation(
                coordinates=[user.longitude, user.latitude],
                updated_at=user.last_location_update,
            )
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            name=user.name,
            role=user.role or "user",
            bio=user.bio,
            location=location,
            location_sharing_enabled=bool(user.location_sharing_enabled),
            geofence_radius=user.geofence_radius,
        )


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenPair(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    refresh_token: str = Field(alias="refreshToken")


class TokenRefresh(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")


class AuthResponse(BaseModel):
    success: bool = True
    user: Optional[UserRead] = None
    tokens: TokenPair


class UserResponse(BaseModel):
    success: bool = True
    user: UserRead


class LocationUpdate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: Optional[datetime] = None


class LocationSettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_location_sharing_enabled: bool = Field(alias="isLocationSharingEnabled")
    geofence_radius: Optional[int] = Field(default=None, alias="geofenceRadius", gt=0, le=1_000_000)
