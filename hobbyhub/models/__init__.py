"""
ORM models for the HobbyHub backend.
"""

from .user import User
from .hobby import Hobby, HobbyCategory
from .event import Event, EventType

__all__ = [
    "User",
    "Hobby",
    "HobbyCategory",
    "Event",
    "EventType",
]
