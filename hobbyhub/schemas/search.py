"""Map markers and the transient search result union shown by the search UI."""
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from hobbyhub.schemas.geo import Coordinate


class MapMarker(BaseModel):
    """A point on the map owned by an event, hobby or post. Read-only for search."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    coordinate: Coordinate
    title: str
    description: str = ""
    category: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    created_by: Optional[str] = Field(default=None, alias="createdBy")

    def matches(self, needle: str) -> bool:
        needle = needle.lower()
        return needle in self.title.lower() or needle in self.description.lower()


class MarkerResult(MapMarker):
    kind: Literal["marker"] = "marker"

    @classmethod
    def from_marker(cls, marker: MapMarker) -> "MarkerResult":
        return cls(**marker.model_dump())

    @property
    def label(self) -> str:
        return self.title


class LocationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["location"] = "location"
    id: str
    title: str
    description: str = ""
    coordinate: Coordinate
    formatted_address: str = Field(alias="formattedAddress")

    @property
    def label(self) -> str:
        return self.formatted_address


SearchResult = Annotated[Union[MarkerResult, LocationResult], Field(discriminator="kind")]
