"""JWT issue / verify utilities (access & refresh tokens)"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
import uuid
import jwt

from hobbyhub.config.settings import get_settings


def _build_payload(subject: str, expires_minutes: int, token_type: str) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {
        "sub": subject,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    security = get_settings().security
    minutes = expires_minutes or security.access_token_expire_minutes
    return jwt.encode(
        _build_payload(subject, minutes, "access"),
        security.jwt_secret,
        algorithm=security.jwt_algorithm,
    )


def create_refresh_token(subject: str, expires_minutes: int | None = None) -> str:
    security = get_settings().security
    minutes = expires_minutes or security.refresh_token_expire_minutes
    return jwt.encode(
        _build_payload(subject, minutes, "refresh"),
        security.refresh_secret,
        algorithm=security.jwt_algorithm,
    )


def create_token_pair(subject: str) -> Dict[str, str]:
    return {
        "token": create_access_token(subject),
        "refresh_token": create_refresh_token(subject),
    }


def decode_token(token: str, refresh: bool = False) -> Dict[str, Any] | None:
    """Return the verified payload, or None for a bad, expired or wrong-kind token."""
    security = get_settings().security
    secret = security.refresh_secret if refresh else security.jwt_secret
    try:
        payload = jwt.decode(token, secret, algorithms=[security.jwt_algorithm])
    except jwt.PyJWTError:
        return None
    expected = "refresh" if refresh else "access"
    if payload.get("type") != expected:
        return None
    return payload
