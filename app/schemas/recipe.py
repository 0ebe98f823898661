"""Schemas for recipe endpoints, ingredient associations and cost breakdown."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.fields import Money, Quantity
from app.services.validators import (
    check_non_negative,
    check_positive,
    clean_name,
    clean_optional_text,
)


class RecipeIngredientIn(BaseModel):
    ingredient_id: int = Field(..., gt=0)
    quantity: Quantity = Field(..., description="Amount of the ingredient, in its unit")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: Decimal) -> Decimal:
        return check_positive(v)


class QuantityUpdate(BaseModel):
    quantity: Quantity

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: Decimal) -> Decimal:
        return check_positive(v)


class RecipeFields(BaseModel):
    """Full representation (PUT)."""

    name: str
    description: str | None = None
    price: Money = Field(..., description="Sale price")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return clean_optional_text(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        return check_non_negative(v)


class RecipeCreate(RecipeFields):
    """POST body; ingredients are stored in the same transaction as the recipe."""

    ingredients: list[RecipeIngredientIn] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    price: Money | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else clean_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return clean_optional_text(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal | None) -> Decimal | None:
        return None if v is None else check_non_negative(v)


class RecipeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecipeIngredientOut(BaseModel):
    """One ingredient line with its cost."""

    ingredient_id: int
    name: str
    unit: str
    price: float
    quantity: float
    line_cost: float


class RecipeDetail(RecipeOut):
    ingredients: list[RecipeIngredientOut] = Field(default_factory=list)
    cost: float = Field(..., description="Sum of ingredient line costs")
    margin: float = Field(..., description="Sale price minus cost")


class RecipeIngredientLink(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    recipe_id: int
    ingredient_id: int
    quantity: float
