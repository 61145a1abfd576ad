"""Query parameter parsing shared by the nearby endpoints."""
from typing import Optional

from fastapi import Query
from pydantic import ValidationError as PydanticValidationError

from hobbyhub.config.settings import get_settings
from hobbyhub.core.exceptions import ValidationError
from hobbyhub.schemas.geo import Coordinate, NearbyQuery


def nearby_query(
    latitude: Optional[float] = Query(None, description="Latitude of the search center"),
    longitude: Optional[float] = Query(None, description="Longitude of the search center"),
    radius: Optional[float] = Query(None, description="Search radius in km (default 10)"),
    hobby_type: Optional[str] = Query(None, alias="hobbyType", description="Hobby category or name"),
) -> NearbyQuery:
    """
    Build a ``NearbyQuery`` from the request.

    Raises:
        ValidationError: when the center is missing or out of range, or the radius is not positive
    """
    if latitude is None or longitude is None:
        raise ValidationError("Please provide latitude and longitude")

    try:
        coordinate = Coordinate(latitude=latitude, longitude=longitude)
    except PydanticValidationError:
        raise ValidationError(
            "Latitude must be between -90 and 90 and longitude between -180 and 180",
            details={"latitude": latitude, "longitude": longitude},
        )

    if radius is None:
        radius = get_settings().nearby.default_radius_km
    if not radius > 0:
        raise ValidationError("Radius must be greater than 0", details={"radius": radius})

    return NearbyQuery(
        coordinate=coordinate,
        radius_km=radius,
        category_filter=hobby_type or None,
    )
