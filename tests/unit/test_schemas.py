from datetime import datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from hobbyhub.models.hobby import HobbyCategory, slugify
from hobbyhub.schemas.event import EventCreate, PointLocation
from hobbyhub.schemas.geo import Coordinate, NearbyQuery
from hobbyhub.schemas.hobby import HobbyCreate
from hobbyhub.schemas.search import LocationResult, MapMarker, MarkerResult, SearchResult
from hobbyhub.schemas.user import LocationSettingsUpdate, LocationUpdate, UserCreate

START = datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc)


def event_payload(**overrides):
    payload = {
        "title": "Sunset photo walk",
        "description": "Bring any camera",
        "hobbyId": 1,
        "location": {"latitude": 40.71, "longitude": -74.0},
        "startDate": START.isoformat(),
        "endDate": (START + timedelta(hours=2)).isoformat(),
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    "lat, lon",
    [(91, 0), (-90.5, 0), (0, 180.1), (0, -181)],
)
def test_coordinate_range(lat, lon):
    with pytest.raises(ValidationError):
        Coordinate(latitude=lat, longitude=lon)


def test_coordinate_is_hashable():
    a = Coordinate(latitude=1, longitude=2)
    assert {a, Coordinate(latitude=1, longitude=2)} == {a}


def test_nearby_query_defaults():
    query = NearbyQuery(coordinate=Coordinate(latitude=0, longitude=0))
    assert query.radius_km == 10
    assert query.category_filter is None
    with pytest.raises(ValidationError):
        NearbyQuery(coordinate=Coordinate(latitude=0, longitude=0), radius_km=0)


def test_event_defaults():
    event = EventCreate.model_validate(event_payload())
    assert event.event_type.value == "Public"
    assert event.capacity == 10
    assert event.location.formatted_address is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"title": "x" * 101},
        {"description": "d" * 1001},
        {"eventType": "Private"},
        {"capacity": 0},
        {"location": {"latitude": 95, "longitude": 0}},
        {"endDate": (START - timedelta(minutes=1)).isoformat()},
    ],
)
def test_event_invariants(overrides):
    with pytest.raises(ValidationError):
        EventCreate.model_validate(event_payload(**overrides))


def test_event_title_whitespace_is_stripped():
    event = EventCreate.model_validate(event_payload(title="  Chess in the park  "))
    assert event.title == "Chess in the park"


def test_hobby_schema():
    hobby = HobbyCreate(name="Rock Climbing", description="Indoor and outdoor")
    assert hobby.category is HobbyCategory.OTHER
    with pytest.raises(ValidationError):
        HobbyCreate(name="n" * 51, description="x")
    with pytest.raises(ValidationError):
        HobbyCreate(name="Knitting", description="x" * 501)
    with pytest.raises(ValidationError):
        HobbyCreate(name="Knitting", description="x", category="Underwater Basket Weaving")


def test_slugify():
    assert slugify("Rock Climbing") == "rock-climbing"
    assert slugify("Gaming & Entertainment") == "gaming---entertainment"


def test_point_location_is_lon_lat():
    point = PointLocation.of(40.71, -74.0, "New York")
    assert point.model_dump(by_alias=True) == {"coordinates": [-74.0, 40.71], "formattedAddress": "New York"}


def test_search_result_union_discriminates_on_kind():
    adapter = TypeAdapter(SearchResult)
    marker = adapter.validate_python(
        {
            "kind": "marker",
            "id": "m1",
            "title": "Photography Workshop",
            "coordinate": {"latitude": 1, "longitude": 2},
            "createdBy": "u1",
        }
    )
    location = adapter.validate_python(
        {
            "kind": "location",
            "id": "location-9",
            "title": "Paris",
            "coordinate": {"latitude": 48.8, "longitude": 2.3},
            "formattedAddress": "Paris, France",
        }
    )
    assert isinstance(marker, MarkerResult) and marker.created_by == "u1"
    assert isinstance(location, LocationResult) and location.label == "Paris, France"


def test_marker_result_copies_marker():
    marker = MapMarker(id="m1", title="Chess", coordinate=Coordinate(latitude=0, longitude=0))
    result = MarkerResult.from_marker(marker)
    assert result.kind == "marker"
    assert result.id == marker.id and result.coordinate == marker.coordinate


def test_user_schemas():
    with pytest.raises(ValidationError):
        UserCreate(username="al", email="al@example.com", password="Passw0rd!", name="Al")
    with pytest.raises(ValidationError):
        UserCreate(username="alice", email="not-an-email", password="Passw0rd!", name="Alice")
    with pytest.raises(ValidationError):
        LocationUpdate(latitude=40.7)
    assert LocationSettingsUpdate.model_validate({"isLocationSharingEnabled": True}).geofence_radius is None
