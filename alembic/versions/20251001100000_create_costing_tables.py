"""Create ingredientes, receitas, clientes, pedidos and association tables.

Revision ID: 20251001100000
Revises: 20251001000000
Create Date: 2025-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20251001100000"
down_revision: Union[str, None] = "20251001000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _owner() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.Integer(),
        sa.ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "ingredientes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _owner(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit", sa.String(length=32), nullable=False, server_default="un"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price >= 0", name="ck_ingredientes_price"),
    )
    op.create_index(op.f("ix_ingredientes_user_id"), "ingredientes", ["user_id"])

    op.create_table(
        "receitas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _owner(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(length=1024), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price >= 0", name="ck_receitas_price"),
    )
    op.create_index(op.f("ix_receitas_user_id"), "receitas", ["user_id"])

    op.create_table(
        "receitas_ingredientes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "recipe_id",
            sa.Integer(),
            sa.ForeignKey("receitas.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "ingredient_id",
            sa.Integer(),
            sa.ForeignKey("ingredientes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("recipe_id", "ingredient_id", name="uq_receita_ingrediente"),
        sa.CheckConstraint("quantity > 0", name="ck_receitas_ingredientes_quantity"),
    )
    op.create_index(
        op.f("ix_receitas_ingredientes_recipe_id"), "receitas_ingredientes", ["recipe_id"]
    )
    op.create_index(
        op.f("ix_receitas_ingredientes_ingredient_id"),
        "receitas_ingredientes",
        ["ingredient_id"],
    )

    op.create_table(
        "clientes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _owner(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clientes_user_id"), "clientes", ["user_id"])

    op.create_table(
        "pedidos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _owner(),
        sa.Column(
            "client_id",
            sa.Integer(),
            sa.ForeignKey("clientes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="media"),
        sa.Column("profit_margin", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="aberto"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_pedidos_user_id"), "pedidos", ["user_id"])
    op.create_index(op.f("ix_pedidos_client_id"), "pedidos", ["client_id"])

    op.create_table(
        "pedidos_receitas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("pedidos.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "recipe_id",
            sa.Integer(),
            sa.ForeignKey("receitas.id"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("order_id", "recipe_id", name="uq_pedido_receita"),
        sa.CheckConstraint("quantity > 0", name="ck_pedidos_receitas_quantity"),
    )
    op.create_index(op.f("ix_pedidos_receitas_order_id"), "pedidos_receitas", ["order_id"])
    op.create_index(op.f("ix_pedidos_receitas_recipe_id"), "pedidos_receitas", ["recipe_id"])


def downgrade() -> None:
    op.drop_table("pedidos_receitas")
    op.drop_table("pedidos")
    op.drop_table("clientes")
    op.drop_table("receitas_ingredientes")
    op.drop_table("receitas")
    op.drop_table("ingredientes")
