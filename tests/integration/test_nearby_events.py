import pytest

from hobbyhub.schemas.geo import Coordinate
from hobbyhub.schemas.search import LocationResult

NEARBY = "/api/v1/events/nearby"


@pytest.fixture
def nyc_events(make_hobby, make_event):
    photography = make_hobby("Photography", "Creative and Visual Arts")
    chess = make_hobby("Chess", "Gaming & Entertainment")
    return {
        "near": make_event(photography, "Photo walk", 40.7128, -74.0060, address="City Hall, New York"),
        "mid": make_event(chess, "Chess in the park", 40.73, -73.99),
        "far": make_event(photography, "Brooklyn portraits", 40.65, -73.95),
        "boston": make_event(chess, "Boston blitz", 42.3601, -71.0589),
    }


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"longitude": -74.0},
        {"latitude": 40.71},
    ],
)
def test_missing_coordinates_is_400(client, params):
    r = client.get(NEARBY, params=params)
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Please provide latitude and longitude"


@pytest.mark.parametrize(
    "params",
    [
        {"latitude": 91, "longitude": 0},
        {"latitude": 0, "longitude": -200},
        {"latitude": 40.71, "longitude": -74.0, "radius": 0},
        {"latitude": 40.71, "longitude": -74.0, "radius": -3},
        {"latitude": "north", "longitude": -74.0},
    ],
)
def test_invalid_parameters_are_400(client, params):
    r = client.get(NEARBY, params=params)
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_radius_query_returns_sorted_matches(client, nyc_events):
    r = client.get(NEARBY, params={"latitude": 40.71, "longitude": -74.00, "radius": 5})
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["success"] is True
    assert body["count"] == 2
    assert [e["id"] for e in body["data"]] == [nyc_events["near"].id, nyc_events["mid"].id]

    distances = [e["distance"] for e in body["data"]]
    assert distances == sorted(distances)
    assert all(d <= 5 for d in distances)

    first = body["data"][0]
    assert first["title"] == "Photo walk"
    assert first["location"] == {"coordinates": [-74.0060, 40.7128], "formattedAddress": "City Hall, New York"}


def test_default_radius_is_ten_km(client, nyc_events):
    r = client.get(NEARBY, params={"latitude": 40.71, "longitude": -74.00})
    ids = [e["id"] for e in r.json()["data"]]
    assert ids == [nyc_events["near"].id, nyc_events["mid"].id, nyc_events["far"].id]


def test_empty_area_returns_empty_list(client, nyc_events):
    r = client.get(NEARBY, params={"latitude": -33.87, "longitude": 151.21, "radius": 50})
    assert r.status_code == 200
    assert r.json() == {"success": True, "count": 0, "data": []}


@pytest.mark.parametrize("hobby_type", ["Gaming & Entertainment", "chess"])
def test_hobby_type_filter(client, nyc_events, hobby_type):
    r = client.get(NEARBY, params={"latitude": 40.71, "longitude": -74.00, "radius": 10, "hobbyType": hobby_type})
    assert [e["id"] for e in r.json()["data"]] == [nyc_events["mid"].id]


def test_limit_caps_results(client, nyc_events):
    r = client.get(NEARBY, params={"latitude": 40.71, "longitude": -74.00, "radius": 500, "limit": 2})
    body = r.json()
    assert body["count"] == 2
    assert [e["id"] for e in body["data"]] == [nyc_events["near"].id, nyc_events["mid"].id]


def test_search_across_antimeridian(client, make_hobby, make_event):
    sailing = make_hobby("Sailing", "Outdoor & Adventure")
    east = make_event(sailing, "Fiji regatta", -17.0, 179.95)
    make_event(sailing, "Far away", -17.0, 170.0)

    r = client.get(NEARBY, params={"latitude": -17.0, "longitude": -179.95, "radius": 20})
    data = r.json()["data"]
    assert [e["id"] for e in data] == [east.id]
    assert data[0]["distance"] == pytest.approx(10.6, abs=0.2)


def test_high_latitude_search_keeps_events_near_the_east_edge(client, make_hobby, make_event):
    skiing = make_hobby("Skiing", "Outdoor & Adventure")
    # About 490 km from (80, 0) on a bearing of 60 degrees.
    edge = make_event(skiing, "Svalbard tour", 81.33, 26.19)
    make_event(skiing, "Too far east", 81.33, 32.0)

    r = client.get(NEARBY, params={"latitude": 80, "longitude": 0, "radius": 500})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert [e["id"] for e in data] == [edge.id]
    assert data[0]["distance"] == pytest.approx(490, abs=2)


def test_event_create_and_fetch(client, register_user, make_hobby, stub_geocoder):
    hobby = make_hobby("Pottery", "Creative and Visual Arts")
    _, headers, _ = register_user()
    stub_geocoder.reverse_result = LocationResult(
        id="location-1",
        title="12 Clay St, New York",
        coordinate=Coordinate(latitude=40.72, longitude=-74.0),
        formatted_address="12 Clay St, New York",
    )

    payload = {
        "title": "Wheel night",
        "description": "Beginners welcome",
        "hobbyId": hobby.id,
        "location": {"latitude": 40.72, "longitude": -74.0},
        "startDate": "2026-11-01T18:00:00Z",
        "endDate": "2026-11-01T20:00:00Z",
    }
    r = client.post("/api/v1/events", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    created = r.json()["data"]
    assert created["eventType"] == "Public"
    assert created["capacity"] == 10
    assert created["location"]["formattedAddress"] == "12 Clay St, New York"
    assert created["hobby"]["name"] == "Pottery"
    assert len(stub_geocoder.reverse_calls) == 1

    fetched = client.get(f"/api/v1/events/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["title"] == "Wheel night"

    nearby = client.get(NEARBY, params={"latitude": 40.72, "longitude": -74.0, "radius": 1})
    assert [e["id"] for e in nearby.json()["data"]] == [created["id"]]


def test_event_create_keeps_going_when_reverse_geocoding_misses(client, register_user, make_hobby, stub_geocoder):
    hobby = make_hobby()
    _, headers, _ = register_user()
    payload = {
        "title": "Night sky",
        "description": "Long exposures",
        "hobbyId": hobby.id,
        "location": {"latitude": 40.0, "longitude": -74.0},
        "startDate": "2026-11-01T22:00:00Z",
        "endDate": "2026-11-02T01:00:00Z",
    }
    r = client.post("/api/v1/events", json=payload, headers=headers)
    assert r.status_code == 201
    assert r.json()["data"]["location"]["formattedAddress"] is None


def test_event_create_requires_auth_and_valid_payload(client, register_user, make_hobby):
    hobby = make_hobby()
    payload = {
        "title": "x" * 101,
        "description": "d",
        "hobbyId": hobby.id,
        "location": {"latitude": 40.0, "longitude": -74.0},
        "startDate": "2026-11-01T22:00:00Z",
        "endDate": "2026-11-02T01:00:00Z",
    }
    assert client.post("/api/v1/events", json=payload).status_code == 401

    _, headers, _ = register_user()
    r = client.post("/api/v1/events", json=payload, headers=headers)
    assert r.status_code == 400
    assert r.json()["success"] is False

    payload.update(title="ok", hobbyId=9999)
    r = client.post("/api/v1/events", json=payload, headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Hobby not found"


def test_unknown_event_is_404(client):
    r = client.get("/api/v1/events/12345")
    assert r.status_code == 404
    assert r.json()["success"] is False
    assert r.json()["error"] == "Event not found"
