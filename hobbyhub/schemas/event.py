from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hobbyhub.models.event import EventType


class EventLocation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    formatted_address: Optional[str] = Field(default=None, alias="formattedAddress", max_length=255)


class EventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    hobby_id: int = Field(..., alias="hobbyId")
    event_type: EventType = Field(default=EventType.PUBLIC, alias="eventType")
    location: EventLocation
    start_date: datetime = Field(..., alias="startDate")
    end_date: datetime = Field(..., alias="endDate")
    capacity: int = Field(default=10, ge=1, le=10000)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class PointLocation(BaseModel):
    """GeoJSON-style point: ``coordinates`` is ``[longitude, latitude]``."""

    model_config = ConfigDict(populate_by_name=True)

    coordinates: List[float]
    formatted_address: Optional[str] = Field(default=None, alias="formattedAddress")

    @classmethod
    def of(cls, latitude: float, longitude: float, formatted_address: Optional[str] = None) -> "PointLocation":
        return cls(coordinates=[longitude, latitude], formatted_address=formatted_address)


class HobbySummary(BaseModel):
    id: int
    name: str
    category: str


class EventRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    event_type: str = Field(alias="eventType")
    hobby: Optional[HobbySummary] = None
    organizer_id: int = Field(alias="organizerId")
    location: PointLocation
    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")
    capacity: int

    @classmethod
    def from_model(cls, event) -> "EventRead":
        hobby = None
        if event.hobby is not None:
            hobby = HobbySummary(id=event.hobby.id, name=event.hobby.name, category=event.hobby.category)
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            event_type=event.event_type,
            hobby=hobby,
            organizer_id=event.organizer_id,
            location=PointLocation.of(event.latitude, event.longitude, event.formatted_address),
            start_date=event.start_date,
            end_date=event.end_date,
            capacity=event.capacity,
        )


class NearbyEventRead(BaseModel):
    id: int
    title: str
    description: str
    distance: float  # km
    location: PointLocation
