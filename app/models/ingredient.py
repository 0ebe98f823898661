"""ORM model for ingredients (priced per unit, owned by a user)."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String

from app.models.base import Base, TimestampMixin


class Ingredient(TimestampMixin, Base):
    __tablename__ = "ingredientes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    unit = Column(String(32), nullable=False, default="un")
