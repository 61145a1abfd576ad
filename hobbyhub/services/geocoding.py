"""
Geocoding Client - forward and reverse lookups against a Nominatim-compatible provider.

The strict methods (``search``, ``reverse``) raise ``ProviderError`` or
``NotFoundError``. The lenient ones (``forward_geocode``, ``reverse_geocode``)
are what the search flow uses: they log the failure and return ``[]`` or
``None`` so a geocoding miss never breaks local results.

Every call is a single attempt. Re-triggering is up to the caller.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from hobbyhub.config.settings import GeocodingSettings, get_settings
from hobbyhub.core.exceptions import NotFoundError, ProviderError
from hobbyhub.schemas.geo import Coordinate
from hobbyhub.schemas.search import LocationResult
from hobbyhub.services.geo import bounding_box

logger = logging.getLogger(__name__)


def _describe(place_type: Optional[str]) -> str:
    if not place_type:
        return ""
    return place_type[:1].upper() + place_type[1:]


def _to_location_result(item: Dict[str, Any]) -> LocationResult:
    """Normalize one provider item. Raises KeyError/TypeError/ValueError when malformed."""
    display_name = item["display_name"]
    coordinate = Coordinate(latitude=float(item["lat"]), longitude=float(item["lon"]))
    place_id = item.get("place_id")
    if place_id is None:
        place_id = f"{coordinate.latitude},{coordinate.longitude}"
    return LocationResult(
        id=f"location-{place_id}",
        title=display_name,
        description=_describe(item.get("type")),
        coordinate=coordinate,
        formatted_address=display_name,
    )


class GeocodingClient:
    """Async client for the address-lookup provider."""

    def __init__(
        self,
        settings: Optional[GeocodingSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings().geocoding
        self.base_url = self.settings.base_url.rstrip("/")
        self.timeout = self.settings.timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)

    async def __aenter__(self) -> "GeocodingClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(
                url,
                params=params,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"Geocoding provider timed out after {self.timeout}s",
                details={"path": path},
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Geocoding provider unreachable: {type(e).__name__}",
                details={"path": path},
            ) from e

        if not response.is_success:
            raise ProviderError(
                f"Geocoding provider returned {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError("Geocoding provider returned invalid JSON", details={"path": path}) from e

    async def search(
        self,
        query: str,
        near: Optional[Coordinate] = None,
        radius_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[LocationResult]:
        """
        Forward geocode ``query``.

        Args:
            query: Free-text address or place name
            near: Restrict results to a box around this point
            radius_km: Half-width of that box (defaults to the configured search radius)
            limit: Maximum number of results

        Returns:
            Normalized location results in provider order

        Raises:
            ProviderError: on timeout, transport error, non-2xx or a non-list body
        """
        query = (query or "").strip()
        if not query:
            return []

        params: Dict[str, Any] = {
            "q": query,
            "format": "json",
            "limit": limit or self.settings.result_limit,
        }
        if near is not None:
            box = bounding_box(near, radius_km or self.settings.search_radius_km)
            params["viewbox"] = box.as_viewbox()
            params["bounded"] = 1

        payload = await self._get("/search", params)
        if not isinstance(payload, list):
            raise ProviderError("Geocoding provider returned an unexpected body", details={"path": "/search"})

        results = []
        for item in payload:
            try:
                results.append(_to_location_result(item))
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed geocoding item: {item!r}")
        return results

    async def reverse(self, coordinate: Coordinate) -> LocationResult:
        """
        Reverse geocode a coordinate.

        Raises:
            ProviderError: on provider failure or a malformed body
            NotFoundError: when the provider has no address for the point
        """
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "format": "json",
        }
        payload = await self._get("/reverse", params)
        if not isinstance(payload, dict):
            raise ProviderError("Geocoding provider returned an unexpected body", details={"path": "/reverse"})
        if "error" in payload:
            raise NotFoundError(
                "No address found for coordinate",
                details={"provider_error": str(payload["error"])},
            )
        try:
            return _to_location_result(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError("Geocoding provider returned a malformed result", details={"path": "/reverse"}) from e

    async def forward_geocode(
        self,
        query: str,
        near: Optional[Coordinate] = None,
        radius_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[LocationResult]:
        """Like ``search`` but never raises: provider failures yield ``[]``."""
        try:
            return await self.search(query, near=near, radius_km=radius_km, limit=limit)
        except ProviderError as e:
            logger.warning(
                f"Forward geocoding failed for '{query}': {e.message}",
                extra={"error_code": e.error_code.value, **e.details},
            )
            return []

    async def reverse_geocode(self, coordinate: Coordinate) -> Optional[LocationResult]:
        """Like ``reverse`` but never raises: no match or provider failure yields ``None``."""
        try:
            return await self.reverse(coordinate)
        except NotFoundError:
            logger.info(f"No reverse geocoding match for {coordinate.latitude},{coordinate.longitude}")
            return None
        except ProviderError as e:
            logger.warning(
                f"Reverse geocoding failed: {e.message}",
                extra={"error_code": e.error_code.value, **e.details},
            )
            return None
