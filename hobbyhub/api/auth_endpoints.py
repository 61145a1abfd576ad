"""Authentication endpoints: register, login, refresh and current user."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hobbyhub.core.db import get_db
from hobbyhub.core.dependencies import get_current_user
from hobbyhub.core.exceptions import AuthenticationError
from hobbyhub.core.jwt import create_token_pair, decode_token
from hobbyhub.models.user import User
from hobbyhub.schemas.user import (
    AuthResponse,
    LoginRequest,
    TokenPair,
    TokenRefresh,
    UserCreate,
    UserRead,
    UserResponse,
)
from hobbyhub.services.user_service import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _tokens_for(user_id: int) -> TokenPair:
    pair = create_token_pair(str(user_id))
    return TokenPair(token=pair["token"], refresh_token=pair["refresh_token"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = UserService(db).register(payload)
    return AuthResponse(user=UserRead.from_model(user), tokens=_tokens_for(user.id))


@router.post("/login", response_model=AuthResponse)
async def login_user(payload: LoginRequest, db: Session = Depends(get_db)):
    user = UserService(db).authenticate(payload.email, payload.password)
    return AuthResponse(user=UserRead.from_model(user), tokens=_tokens_for(user.id))


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(payload: TokenRefresh, db: Session = Depends(get_db)):
    decoded = decode_token(payload.refresh_token, refresh=True)
    if not decoded or "sub" not in decoded:
        raise AuthenticationError("Invalid refresh token")
    try:
        user = UserService(db).get_user(int(decoded["sub"]))
    except (TypeError, ValueError):
        user = None
    if user is None:
        raise AuthenticationError("Invalid refresh token")
    return AuthResponse(tokens=_tokens_for(user.id))


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return UserResponse(user=UserRead.from_model(current_user))
