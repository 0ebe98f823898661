"""ORM models for orders and the recipes they contain."""

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin


class Order(TimestampMixin, Base):
    """
    An order for a client.

    total_price is derived: sum of item quantity * unit_price, plus
    profit_margin percent. It is recomputed whenever items or the margin change.
    """

    __tablename__ = "pedidos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    client_id = Column(
        Integer,
        ForeignKey("clientes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description = Column(Text, nullable=True)
    priority = Column(String(16), nullable=False, default="media")
    profit_margin = Column(Numeric(6, 2), nullable=False, default=0)
    status = Column(String(16), nullable=False, default="aberto")
    due_date = Column(Date, nullable=True)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)

    client = relationship("Client", lazy="joined")
    items = relationship(
        "OrderRecipe",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class OrderRecipe(Base):
    """One recipe line of an order; unit_price is the recipe price when it was added."""

    __tablename__ = "pedidos_receitas"
    __table_args__ = (
        UniqueConstraint("order_id", "recipe_id", name="uq_pedido_receita"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey("pedidos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recipe_id = Column(
        Integer,
        ForeignKey("receitas.id"),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    recipe = relationship("Recipe", lazy="joined")
