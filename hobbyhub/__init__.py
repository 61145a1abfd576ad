"""HobbyHub: nearby hobby and event discovery."""

__version__ = "1.0.0"
