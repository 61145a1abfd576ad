"""
Device-side half of HobbyHub: location, nearby search, backend client and
local storage. Everything is asyncio and takes its collaborators explicitly.
"""

from .storage import KeyValueStore, MemoryStore, JsonFileStore, TokenStore
from .api import HobbyHubApiClient
from .location import (
    LAST_LOCATION_KEY,
    LOCATION_EXPIRY_KEY,
    LocationProvider,
    LocationService,
    LocationWatch,
    PermissionStatus,
)
from .search import NearbySearchAggregator, LocationSelectEvent, merge_results

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "TokenStore",
    "HobbyHubApiClient",
    "LocationProvider",
    "LocationService",
    "LocationWatch",
    "PermissionStatus",
    "LAST_LOCATION_KEY",
    "LOCATION_EXPIRY_KEY",
    "NearbySearchAggregator",
    "LocationSelectEvent",
    "merge_results",
]
