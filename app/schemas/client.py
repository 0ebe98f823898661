"""Schemas for client endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.services.validators import (
    PHONE_MAX_LEN,
    clean_name,
    clean_optional_text,
    normalize_email,
)


class ClientFields(BaseModel):
    """Full representation (POST and PUT)."""

    name: str
    email: EmailStr
    phone: str
    address: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return clean_name(v, PHONE_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str | None) -> str | None:
        return clean_optional_text(v)


class ClientUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v, PHONE_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return None if v is None else normalize_email(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str | None) -> str | None:
        return clean_optional_text(v)


class ClientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    email: str
    phone: str
    address: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
