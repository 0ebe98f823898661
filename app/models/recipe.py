"""ORM models for recipes and their ingredient associations."""

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin


class Recipe(TimestampMixin, Base):
    """
    A recipe built from ingredients.

    price is the sale price set by the owner; the ingredient cost is derived
    from the associations (see app.services.costing).
    """

    __tablename__ = "receitas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)

    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class RecipeIngredient(Base):
    __tablename__ = "receitas_ingredientes"
    __table_args__ = (
        UniqueConstraint("recipe_id", "ingredient_id", name="uq_receita_ingrediente"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(
        Integer,
        ForeignKey("receitas.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ingredient_id = Column(
        Integer,
        ForeignKey("ingredientes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity = Column(Numeric(12, 3), nullable=False)

    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient", lazy="joined")
