"""
Dependency providers for FastAPI routes.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from hobbyhub.core.db import get_db
from hobbyhub.core.exceptions import AuthenticationError
from hobbyhub.core.jwt import decode_token
from hobbyhub.models.user import User
from hobbyhub.services.geocoding import GeocodingClient

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


def get_geocoding_client(request: Request) -> GeocodingClient:
    """
    Shared geocoding client created in the application lifespan.

    Falls back to a per-app client on first use so the dependency still
    works when the lifespan has not run (e.g. a bare TestClient).
    """
    client = getattr(request.app.state, 'geocoding_client', None)
    if client is None:
        client = GeocodingClient()
        request.app.state.geocoding_client = client
    return client


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the bearer token to a user.

    Raises:
        AuthenticationError: for a missing/malformed header, a bad or expired
            token, or a token whose user no longer exists
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Not authorized, no token")

    payload = decode_token(token.strip())
    if not payload or "sub" not in payload:
        raise AuthenticationError("Not authorized, token failed")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Not authorized, token failed")

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Token presented for missing user {user_id}")
        raise AuthenticationError("Not authorized, user not found")
    return user
