"""Orders: CRUD, recipe items and derived totals."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, patch_fields
from app.core.database import get_db, transaction
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models import Client, Order, OrderRecipe, Recipe
from app.schemas.auth import CurrentUser
from app.schemas.order import (
    OrderCreate,
    OrderDetail,
    OrderFields,
    OrderItemIn,
    OrderItemLink,
    OrderItemOut,
    OrderItemQuantity,
    OrderOut,
    OrderUpdate,
)
from app.services import costing
from app.services.ownership import owned_or_404, scoped

router = APIRouter()

OrderId = Annotated[int, Path(gt=0, description="Order id")]
RecipeId = Annotated[int, Path(gt=0, description="Recipe id")]
NOT_FOUND = "Order not found."
CLIENT_NOT_FOUND = "Client not found."
RECIPE_NOT_FOUND = "Recipe not found."
ITEM_NOT_FOUND = "Recipe is not part of this order."


def _recalculate(order: Order) -> None:
    """Recompute total_price from the items and the profit margin."""
    subtotal = costing.order_subtotal(
        (item.quantity, item.unit_price) for item in order.items
    )
    total = costing.order_total(subtotal, order.profit_margin or 0)
    if total > costing.MAX_AMOUNT:
        raise ValidationError("Order total exceeds the largest amount that can be stored.")
    order.total_price = total


def _order_detail(order: Order) -> OrderDetail:
    items = [
        OrderItemOut(
            recipe_id=item.recipe_id,
            name=item.recipe.name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=costing.line_cost(item.quantity, item.unit_price),
        )
        for item in sorted(order.items, key=lambda i: i.id)
    ]
    base = OrderOut.model_validate(order)
    return OrderDetail(**base.model_dump(), recipes=items)


def _find_item(order: Order, recipe_id: int) -> OrderRecipe:
    for item in order.items:
        if item.recipe_id == recipe_id:
            return item
    raise NotFoundError(ITEM_NOT_FOUND)


def _new_item(db: Session, user: CurrentUser, item: OrderItemIn) -> OrderRecipe:
    """Build an order line, snapshotting the recipe's current price."""
    recipe = owned_or_404(db, Recipe, item.recipe_id, user, RECIPE_NOT_FOUND)
    return OrderRecipe(
        recipe_id=recipe.id,
        quantity=item.quantity,
        unit_price=recipe.price,
    )


@router.get("", response_model=list[OrderOut])
def list_orders(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[Order]:
    return scoped(db.query(Order), Order, user).order_by(Order.id).all()


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: OrderId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> OrderDetail:
    return _order_detail(owned_or_404(db, Order, order_id, user, NOT_FOUND))


@router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> OrderDetail:
    """
    Create an order for one of the caller's clients, optionally with recipe items.

    The order and its items are written in one transaction. Each item keeps
    the recipe price at the time it was added; total_price is derived.
    """
    owned_or_404(db, Client, body.client_id, user, CLIENT_NOT_FOUND)
    seen: set[int] = set()
    for item in body.recipes:
        if item.recipe_id in seen:
            raise ValidationError(f"Recipe {item.recipe_id} is listed more than once.")
        seen.add(item.recipe_id)

    order = Order(user_id=user.id, **body.model_dump(exclude={"recipes"}))
    order.items = [_new_item(db, user, item) for item in body.recipes]
    _recalculate(order)
    with transaction(db):
        db.add(order)
    db.refresh(order)
    return _order_detail(order)


@router.put("/{order_id}", response_model=OrderOut)
def replace_order(
    order_id: OrderId,
    body: OrderFields,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Order:
    order = owned_or_404(db, Order, order_id, user, NOT_FOUND)
    owned_or_404(db, Client, body.client_id, user, CLIENT_NOT_FOUND)
    with transaction(db):
        for key, value in body.model_dump().items():
            setattr(order, key, value)
        _recalculate(order)
    db.refresh(order)
    return order


@router.patch("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: OrderId,
    body: OrderUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Order:
    data = patch_fields(body, nullable=frozenset({"description", "due_date"}))
    order = owned_or_404(db, Order, order_id, user, NOT_FOUND)
    if "client_id" in data:
        owned_or_404(db, Client, data["client_id"], user, CLIENT_NOT_FOUND)
    with transaction(db):
        for key, value in data.items():
            setattr(order, key, value)
        _recalculate(order)
    db.refresh(order)
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_order(
    order_id: OrderId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    order = owned_or_404(db, Order, order_id, user, NOT_FOUND)
    with transaction(db):
        db.delete(order)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{order_id}/receitas",
    response_model=OrderItemLink,
    status_code=status.HTTP_201_CREATED,
)
def add_recipe(
    order_id: OrderId,
    body: OrderItemIn,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> OrderRecipe:
    order = owned_or_404(db, Order, order_id, user, NOT_FOUND)
    if any(i.recipe_id == body.recipe_id for i in order.items):
        raise ConflictError("Recipe is already part of this order.")
    item = _new_item(db, user, body)
    try:
        with transaction(db):
            order.items.append(item)
            _recalculate(order)
    except IntegrityError as e:
        raise ConflictError("Recipe is already part of this order.") from e
    db.refresh(item)
    return item


@router.patch("/{order_id}/receitas/{recipe_id}", response_model=OrderItemLink)
def update_recipe_quantity(
    order_id: OrderId,
    recipe_id: RecipeId,
    body: OrderItemQuantity,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> OrderRecipe:
    order = owned_or_404(db, Order, order_id, user, NOT_FOUND)
    item = _find_item(order, recipe_id)
    with transaction(db):
        item.quantity = body.quantity
        _recalculate(order)
    db.refresh(item)
    return item


@router.delete(
    "/{order_id}/receitas/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def remove_recipe(
    order_id: OrderId,
    recipe_id: RecipeId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    order = owned_or_404(db, Order, order_id, user, NOT_FOUND)
    item = _find_item(order, recipe_id)
    with transaction(db):
        order.items.remove(item)
        _recalculate(order)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
