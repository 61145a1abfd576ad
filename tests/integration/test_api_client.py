import httpx
import pytest

from hobbyhub.client.api import HobbyHubApiClient
from hobbyhub.client.storage import MemoryStore, TokenStore
from hobbyhub.core.exceptions import ApiError, AuthenticationError
from hobbyhub.main import app
from hobbyhub.models import User
from hobbyhub.schemas.geo import Coordinate, NearbyQuery
from hobbyhub.schemas.user import LocationSettingsUpdate


@pytest.fixture
def tokens():
    return TokenStore(fallback=MemoryStore())


@pytest.fixture
def api(client, tokens):
    # ``client`` sets up the database and the geocoder override
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")
    return HobbyHubApiClient("http://testserver", tokens, http_client=http_client)


@pytest.mark.asyncio
async def test_register_and_push_location(api, tokens, db):
    user = await api.register("bob_1", "bob@example.com", "Passw0rd!", "Bob")
    assert (await tokens.get_token()) is not None

    await api.update_location(Coordinate(latitude=40.7, longitude=-74.0))
    await api.update_location_settings(LocationSettingsUpdate(is_location_sharing_enabled=True))

    stored = db.get(User, user["id"])
    db.refresh(stored)
    assert stored.latitude == 40.7
    assert stored.location_sharing_enabled is True
    assert stored.geofence_radius == 5000


@pytest.mark.asyncio
async def test_expired_access_token_is_refreshed_once(api, tokens):
    await api.register("bob_1", "bob@example.com", "Passw0rd!", "Bob")
    _, refresh = await tokens.get_tokens()
    await tokens.set_tokens("stale-token", refresh)

    await api.update_location(Coordinate(latitude=1.0, longitude=1.0))

    token, new_refresh = await tokens.get_tokens()
    assert token != "stale-token"
    assert new_refresh != refresh


@pytest.mark.asyncio
async def test_failed_refresh_clears_tokens(api, tokens):
    await tokens.set_tokens("stale-token", "stale-refresh")
    with pytest.raises(AuthenticationError):
        await api.update_location(Coordinate(latitude=1.0, longitude=1.0))
    assert await tokens.get_tokens() == (None, None)


@pytest.mark.asyncio
async def test_login_errors(api):
    with pytest.raises(AuthenticationError):
        await api.login("nobody@example.com", "Passw0rd!")


@pytest.mark.asyncio
async def test_nearby_queries(api, make_hobby, make_event):
    chess = make_hobby("Chess", "Gaming & Entertainment")
    event = make_event(chess, "Chess in the park", 40.73, -73.99)

    query = NearbyQuery(coordinate=Coordinate(latitude=40.71, longitude=-74.0), radius_km=5)
    events = await api.get_nearby_events(query)
    hobbies = await api.get_nearby_hobbies(query)

    assert [e["id"] for e in events] == [event.id]
    assert events[0]["location"]["coordinates"] == [-73.99, 40.73]
    assert [h["name"] for h in hobbies] == ["Chess"]


@pytest.mark.asyncio
async def test_non_2xx_raises_api_error(api):
    query = NearbyQuery(coordinate=Coordinate(latitude=40.71, longitude=-74.0))
    with pytest.raises(ApiError) as exc:
        await api._request("GET", "/events/999999", auth=False)
    assert exc.value.status_code == 404
    assert exc.value.message == "Event not found"
    assert await api.get_nearby_events(query) == []
