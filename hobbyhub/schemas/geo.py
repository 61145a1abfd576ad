"""Geographic value types shared by the server and the device-side client."""
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A WGS84 point. Immutable and hashable so it can key caches and sets."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class BoundingBox(NamedTuple):
    """``[minLon, minLat, maxLon, maxLat]``, the order providers expect in a viewbox."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def touches_antimeridian(self) -> bool:
        """True when the box was clamped at +-180, so a longitude range filter would miss points."""
        return self.min_lon <= -180.0 or self.max_lon >= 180.0

    def as_viewbox(self) -> str:
        return ",".join(f"{v:.6f}" for v in self)


class NearbyQuery(BaseModel):
    coordinate: Coordinate
    radius_km: float = Field(default=10.0, gt=0)
    category_filter: Optional[str] = None
