import httpx
import pytest

from hobbyhub.client.api import HobbyHubApiClient
from hobbyhub.client.storage import MemoryStore, TokenStore
from hobbyhub.core.exceptions import ApiError
from hobbyhub.schemas.geo import Coordinate

BASE_URL = "http://backend.test"


async def make_api(handler):
    tokens = TokenStore(fallback=MemoryStore())
    await tokens.set_tokens("access", "refresh")
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HobbyHubApiClient(BASE_URL, tokens, http_client=http_client)


@pytest.mark.asyncio
async def test_no_content_response_decodes_to_empty_dict():
    api = await make_api(lambda request: httpx.Response(204))
    assert await api.update_location(Coordinate(latitude=40.71, longitude=-74.0)) == {}


@pytest.mark.asyncio
async def test_non_json_success_body_raises_api_error():
    api = await make_api(lambda request: httpx.Response(200, text="<html>ok</html>"))
    with pytest.raises(ApiError) as exc:
        await api.update_location(Coordinate(latitude=40.71, longitude=-74.0))
    assert exc.value.status_code == 502
    assert exc.value.details == {"path": "/users/location"}


@pytest.mark.asyncio
async def test_list_success_body_raises_api_error():
    api = await make_api(lambda request: httpx.Response(200, json=[1, 2]))
    with pytest.raises(ApiError) as exc:
        await api._request("GET", "/events/nearby", auth=False)
    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_bearer_token_is_attached():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "message": "Location updated"})

    api = await make_api(handler)
    body = await api.update_location(Coordinate(latitude=40.71, longitude=-74.0))

    assert body["success"] is True
    assert seen[0].headers["Authorization"] == "Bearer access"
    assert seen[0].url.path == "/api/v1/users/location"
