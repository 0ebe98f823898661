"""Ingredient CRUD, scoped to the caller's own rows (admins see all)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, patch_fields
from app.core.database import get_db, transaction
from app.models import Ingredient
from app.schemas.auth import CurrentUser
from app.schemas.ingredient import IngredientFields, IngredientOut, IngredientUpdate
from app.services.ownership import owned_or_404, scoped

router = APIRouter()

IngredientId = Annotated[int, Path(gt=0, description="Ingredient id")]
NOT_FOUND = "Ingredient not found."


@router.get("", response_model=list[IngredientOut])
def list_ingredients(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[Ingredient]:
    query = scoped(db.query(Ingredient), Ingredient, user)
    return query.order_by(Ingredient.name, Ingredient.id).all()


@router.get("/{ingredient_id}", response_model=IngredientOut)
def get_ingredient(
    ingredient_id: IngredientId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Ingredient:
    return owned_or_404(db, Ingredient, ingredient_id, user, NOT_FOUND)


@router.post("", response_model=IngredientOut, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    body: IngredientFields,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Ingredient:
    ingredient = Ingredient(user_id=user.id, **body.model_dump())
    with transaction(db):
        db.add(ingredient)
    db.refresh(ingredient)
    return ingredient


@router.put("/{ingredient_id}", response_model=IngredientOut)
def replace_ingredient(
    ingredient_id: IngredientId,
    body: IngredientFields,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Ingredient:
    ingredient = owned_or_404(db, Ingredient, ingredient_id, user, NOT_FOUND)
    with transaction(db):
        for key, value in body.model_dump().items():
            setattr(ingredient, key, value)
    db.refresh(ingredient)
    return ingredient


@router.patch("/{ingredient_id}", response_model=IngredientOut)
def update_ingredient(
    ingredient_id: IngredientId,
    body: IngredientUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Ingredient:
    data = patch_fields(body)
    ingredient = owned_or_404(db, Ingredient, ingredient_id, user, NOT_FOUND)
    with transaction(db):
        for key, value in data.items():
            setattr(ingredient, key, value)
    db.refresh(ingredient)
    return ingredient


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_ingredient(
    ingredient_id: IngredientId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete an ingredient; it is also removed from every recipe that used it."""
    ingredient = owned_or_404(db, Ingredient, ingredient_id, user, NOT_FOUND)
    with transaction(db):
        db.delete(ingredient)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
