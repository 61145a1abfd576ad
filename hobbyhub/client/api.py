"""
Backend API client used by the device-side services.

Wraps ``httpx.AsyncClient``: prefixes ``/api/v1``, attaches the bearer token
from the token store, and on a 401 refreshes the tokens once and replays the
request.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from hobbyhub.core.exceptions import ApiError, AuthenticationError
from hobbyhub.client.storage import TokenStore
from hobbyhub.schemas.geo import Coordinate, NearbyQuery
from hobbyhub.schemas.user import LocationSettingsUpdate

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase or f"HTTP {response.status_code}"


def _json_body(response: httpx.Response, path: str) -> Dict[str, Any]:
    """Decode a success body. An empty body (204) decodes to ``{}``."""
    if response.status_code == 204 or not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as e:
        raise ApiError(502, "Backend returned invalid JSON", details={"path": path}) from e
    if not isinstance(body, dict):
        raise ApiError(502, "Backend returned an unexpected body", details={"path": path})
    return body


class HobbyHubApiClient:
    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.tokens = token_store
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "HobbyHubApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    async def _send(
        self,
        method: str,
        path: str,
        auth: bool,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if auth:
            token = await self.tokens.get_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        try:
            return await self._client.request(method, self._url(path), json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise ApiError(503, f"Backend unreachable: {type(e).__name__}", details={"path": path}) from e

    async def _request(
        self,
        method: str,
        path: str,
        auth: bool = True,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        response = await self._send(method, path, auth, json=json, params=params)

        if response.status_code == 401 and auth:
            logger.info(f"{method} {path} got 401, refreshing tokens")
            await self.refresh_tokens()
            response = await self._send(method, path, auth, json=json, params=params)
            if response.status_code == 401:
                await self.tokens.clear()
                raise AuthenticationError(_error_message(response))

        if not response.is_success:
            raise ApiError(response.status_code, _error_message(response), details={"path": path})
        return _json_body(response, path)

    async def _store_tokens(self, body: Dict[str, Any]) -> None:
        tokens = body.get("tokens") or {}
        if tokens.get("token"):
            await self.tokens.set_tokens(tokens["token"], tokens.get("refreshToken"))

    async def register(self, username: str, email: str, password: str, name: str) -> Dict[str, Any]:
        body = await self._request(
            "POST",
            "/auth/register",
            auth=False,
            json={"username": username, "email": email, "password": password, "name": name},
        )
        await self._store_tokens(body)
        return body.get("user")

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and keep the issued tokens. Returns the user payload."""
        response = await self._send("POST", "/auth/login", auth=False, json={"email": email, "password": password})
        if response.status_code == 401:
            raise AuthenticationError(_error_message(response))
        if not response.is_success:
            raise ApiError(response.status_code, _error_message(response))
        body = _json_body(response, "/auth/login")
        await self._store_tokens(body)
        return body.get("user")

    async def refresh_tokens(self) -> None:
        """
        Exchange the refresh token for a new pair.

        Raises:
            AuthenticationError: when there is no refresh token or the backend
                rejects it; stored tokens are cleared first
        """
        refresh_token = await self.tokens.get_refresh_token()
        if not refresh_token:
            await self.tokens.clear()
            raise AuthenticationError("Session expired, please log in again")

        response = await self._send("POST", "/auth/refresh", auth=False, json={"refreshToken": refresh_token})
        if not response.is_success:
            await self.tokens.clear()
            raise AuthenticationError("Session expired, please log in again")
        await self._store_tokens(_json_body(response, "/auth/refresh"))

    async def update_location(self, coordinate: Coordinate, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
        }
        if timestamp is not None:
            payload["timestamp"] = timestamp.isoformat()
        return await self._request("POST", "/users/location", json=payload)

    async def update_location_settings(self, settings: LocationSettingsUpdate) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/users/location/settings",
            json=settings.model_dump(by_alias=True, exclude_none=True),
        )

    def _nearby_params(self, query: NearbyQuery, limit: Optional[int]) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "latitude": query.coordinate.latitude,
            "longitude": query.coordinate.longitude,
            "radius": query.radius_km,
        }
        if query.category_filter:
            params["hobbyType"] = query.category_filter
        if limit is not None:
            params["limit"] = limit
        return params

    async def get_nearby_events(self, query: NearbyQuery, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/events/nearby", auth=False, params=self._nearby_params(query, limit))
        return body.get("data", [])

    async def get_nearby_hobbies(self, query: NearbyQuery, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/hobbies/nearby", auth=False, params=self._nearby_params(query, limit))
        return body.get("data", [])
