"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserPublic,
    UserUpdate,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserPublic",
    "UserUpdate",
]
