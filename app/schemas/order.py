"""Schemas for order endpoints and order items."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.fields import ItemQuantity, Percent
from app.services.validators import check_non_negative, clean_optional_text

Priority = Literal["baixa", "media", "alta"]
OrderStatus = Literal["aberto", "em_producao", "concluido", "cancelado"]


class OrderItemIn(BaseModel):
    recipe_id: int = Field(..., gt=0)
    quantity: ItemQuantity


class OrderItemQuantity(BaseModel):
    quantity: ItemQuantity


class OrderFields(BaseModel):
    """Full representation (PUT). total_price is derived and not accepted."""

    client_id: int = Field(..., gt=0)
    description: str | None = None
    priority: Priority = "media"
    profit_margin: Percent = Field(default=Decimal(0), description="Percent added to the subtotal")
    status: OrderStatus = "aberto"
    due_date: date | None = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return clean_optional_text(v)

    @field_validator("profit_margin")
    @classmethod
    def validate_margin(cls, v: Decimal) -> Decimal:
        return check_non_negative(v)


class OrderCreate(OrderFields):
    """POST body; items are stored in the same transaction as the order."""

    recipes: list[OrderItemIn] = Field(default_factory=list)


class OrderUpdate(BaseModel):
    client_id: int | None = Field(default=None, gt=0)
    description: str | None = None
    priority: Priority | None = None
    profit_margin: Percent | None = None
    status: OrderStatus | None = None
    due_date: date | None = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return clean_optional_text(v)

    @field_validator("profit_margin")
    @classmethod
    def validate_margin(cls, v: Decimal | None) -> Decimal | None:
        return None if v is None else check_non_negative(v)


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    client_id: int
    description: str | None = None
    priority: str
    profit_margin: float
    status: str
    due_date: date | None = None
    total_price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderItemOut(BaseModel):
    recipe_id: int
    name: str
    quantity: int
    unit_price: float
    line_total: float


class OrderDetail(OrderOut):
    recipes: list[OrderItemOut] = Field(default_factory=list)


class OrderItemLink(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    recipe_id: int
    quantity: int
    unit_price: float
