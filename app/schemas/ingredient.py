"""Schemas for ingredient endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.fields import Money
from app.services.validators import UNIT_MAX_LEN, check_non_negative, clean_name


class IngredientFields(BaseModel):
    """Full representation (POST and PUT)."""

    name: str = Field(..., description="Ingredient name")
    price: Money = Field(..., description="Price per unit")
    unit: str = Field(default="un", description="Measurement unit, e.g. kg, l, un")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: str) -> str:
        return clean_name(v, UNIT_MAX_LEN)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        return check_non_negative(v)


class IngredientUpdate(BaseModel):
    name: str | None = None
    price: Money | None = None
    unit: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v)

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v, UNIT_MAX_LEN)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal | None) -> Decimal | None:
        return None if v is None else check_non_negative(v)


class IngredientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    price: float
    unit: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
