from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hobbyhub.models.hobby import HobbyCategory


class HobbyCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    category: HobbyCategory = HobbyCategory.OTHER


class HobbyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str
    category: str
    popularity: int = 0


class NearbyHobbyRead(HobbyRead):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    distance: float  # km to the closest event
    events_nearby: int = Field(alias="eventsNearby")
    nearest_event_id: Optional[int] = Field(default=None, alias="nearestEventId")
