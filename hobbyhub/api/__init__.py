# API endpoints and routers

from .auth_endpoints import router as auth_router
from .event_endpoints import router as event_router
from .hobby_endpoints import router as hobby_router
from .user_endpoints import router as user_router

__all__ = [
    "auth_router",
    "event_router",
    "hobby_router",
    "user_router",
]
