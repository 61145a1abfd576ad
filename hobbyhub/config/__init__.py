"""
Configuration package for the HobbyHub backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    DatabaseSettings,
    SecuritySettings,
    GeocodingSettings,
    SearchSettings,
    NearbySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "DatabaseSettings",
    "SecuritySettings",
    "GeocodingSettings",
    "SearchSettings",
    "NearbySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
