"""Request/response schemas for auth and user administration endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import Role
from app.services.validators import check_password, clean_name, normalize_email


class RegisterRequest(BaseModel):
    """New account; role is always standard."""

    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Login identifier (case-insensitive)")
    password: str = Field(..., description="Password (6-128 characters)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=255, description="Email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class UserPublic(BaseModel):
    """User fields safe to return to clients (never the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TokenResponse(BaseModel):
    """Access token body; the refresh token travels only in the session cookie."""

    token_type: str = Field(default="Bearer", description="Token type")
    access_token: str = Field(..., description="JWT access token")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class AuthResponse(TokenResponse):
    """Token body plus the authenticated user (register and login)."""

    user: UserPublic


class CurrentUser(BaseModel):
    """Authenticated identity taken from access token claims."""

    id: int
    role: Role
    name: str

    def is_admin(self) -> bool:
        return self.role.is_admin()


class UserUpdate(BaseModel):
    """Admin partial update; at least one field must be present."""

    name: str | None = None
    email: EmailStr | None = None
    role: Role | None = None
    password: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return None if v is None else normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return None if v is None else check_password(v)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password(v)
