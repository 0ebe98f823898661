"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.client import Client
from app.models.ingredient import Ingredient
from app.models.order import Order, OrderRecipe
from app.models.recipe import Recipe, RecipeIngredient
from app.models.user import Role, User

__all__ = [
    "Base",
    "Client",
    "Ingredient",
    "Order",
    "OrderRecipe",
    "Recipe",
    "RecipeIngredient",
    "Role",
    "User",
]
