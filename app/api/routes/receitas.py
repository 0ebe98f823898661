"""Recipes: CRUD, ingredient associations, cost breakdown and image upload."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Response, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_image_store, patch_fields
from app.core.database import get_db, transaction
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models import Ingredient, Recipe, RecipeIngredient
from app.schemas.auth import CurrentUser
from app.schemas.recipe import (
    QuantityUpdate,
    RecipeCreate,
    RecipeDetail,
    RecipeFields,
    RecipeIngredientIn,
    RecipeIngredientLink,
    RecipeIngredientOut,
    RecipeOut,
    RecipeUpdate,
)
from app.services import costing
from app.services.ownership import owned_or_404, scoped
from app.services.storage import ImageStore

logger = logging.getLogger(__name__)

router = APIRouter()

RecipeId = Annotated[int, Path(gt=0, description="Recipe id")]
IngredientId = Annotated[int, Path(gt=0, description="Ingredient id")]
NOT_FOUND = "Recipe not found."
INGREDIENT_NOT_FOUND = "Ingredient not found."
ASSOCIATION_NOT_FOUND = "Ingredient is not part of this recipe."


def _recipe_detail(recipe: Recipe) -> RecipeDetail:
    """Recipe fields plus ingredient lines, total ingredient cost and margin."""
    lines: list[RecipeIngredientOut] = []
    for item in sorted(recipe.ingredients, key=lambda i: i.ingredient.name):
        lines.append(
            RecipeIngredientOut(
                ingredient_id=item.ingredient_id,
                name=item.ingredient.name,
                unit=item.ingredient.unit,
                price=item.ingredient.price,
                quantity=item.quantity,
                line_cost=costing.line_cost(item.quantity, item.ingredient.price),
            )
        )
    cost = costing.recipe_cost(
        (item.quantity, item.ingredient.price) for item in recipe.ingredients
    )
    base = RecipeOut.model_validate(recipe)
    return RecipeDetail(
        **base.model_dump(),
        ingredients=lines,
        cost=cost,
        margin=costing.to_money(recipe.price) - cost,
    )


def _find_association(recipe: Recipe, ingredient_id: int) -> RecipeIngredient:
    for item in recipe.ingredients:
        if item.ingredient_id == ingredient_id:
            return item
    raise NotFoundError(ASSOCIATION_NOT_FOUND)


def _check_unique_ingredients(items: list[RecipeIngredientIn]) -> None:
    seen: set[int] = set()
    for item in items:
        if item.ingredient_id in seen:
            raise ValidationError(f"Ingredient {item.ingredient_id} is listed more than once.")
        seen.add(item.ingredient_id)


@router.get("", response_model=list[RecipeOut])
def list_recipes(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[Recipe]:
    query = scoped(db.query(Recipe), Recipe, user)
    return query.order_by(Recipe.name, Recipe.id).all()


@router.get("/{recipe_id}", response_model=RecipeDetail)
def get_recipe(
    recipe_id: RecipeId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> RecipeDetail:
    """Recipe with its ingredients, ingredient cost and margin over the sale price."""
    return _recipe_detail(owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND))


@router.post("", response_model=RecipeDetail, status_code=status.HTTP_201_CREATED)
def create_recipe(
    body: RecipeCreate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> RecipeDetail:
    """
    Create a recipe, optionally with its ingredient list.

    The recipe and its associations are written in one transaction; an
    unknown (or someone else's) ingredient aborts the whole request with 404.
    """
    _check_unique_ingredients(body.ingredients)
    for item in body.ingredients:
        owned_or_404(db, Ingredient, item.ingredient_id, user, INGREDIENT_NOT_FOUND)

    recipe = Recipe(
        user_id=user.id,
        name=body.name,
        description=body.description,
        price=body.price,
    )
    recipe.ingredients = [
        RecipeIngredient(ingredient_id=item.ingredient_id, quantity=item.quantity)
        for item in body.ingredients
    ]
    with transaction(db):
        db.add(recipe)
    db.refresh(recipe)
    return _recipe_detail(recipe)


@router.put("/{recipe_id}", response_model=RecipeOut)
def replace_recipe(
    recipe_id: RecipeId,
    body: RecipeFields,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Recipe:
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    with transaction(db):
        for key, value in body.model_dump().items():
            setattr(recipe, key, value)
    db.refresh(recipe)
    return recipe


@router.patch("/{recipe_id}", response_model=RecipeOut)
def update_recipe(
    recipe_id: RecipeId,
    body: RecipeUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Recipe:
    data = patch_fields(body, nullable=frozenset({"description"}))
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    with transaction(db):
        for key, value in data.items():
            setattr(recipe, key, value)
    db.refresh(recipe)
    return recipe


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_recipe(
    recipe_id: RecipeId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[ImageStore, Depends(get_image_store)],
) -> Response:
    """Delete a recipe and its image. 409 while an order still contains it."""
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    image_url = recipe.image_url
    try:
        with transaction(db):
            db.delete(recipe)
    except IntegrityError as e:
        raise ConflictError("Recipe is part of an order and cannot be deleted.") from e
    store.delete(image_url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{recipe_id}/ingredientes",
    response_model=RecipeIngredientLink,
    status_code=status.HTTP_201_CREATED,
)
def add_ingredient(
    recipe_id: RecipeId,
    body: RecipeIngredientIn,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> RecipeIngredient:
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    owned_or_404(db, Ingredient, body.ingredient_id, user, INGREDIENT_NOT_FOUND)
    if any(i.ingredient_id == body.ingredient_id for i in recipe.ingredients):
        raise ConflictError("Ingredient is already part of this recipe.")
    link = RecipeIngredient(ingredient_id=body.ingredient_id, quantity=body.quantity)
    try:
        with transaction(db):
            recipe.ingredients.append(link)
    except IntegrityError as e:
        raise ConflictError("Ingredient is already part of this recipe.") from e
    db.refresh(link)
    return link


@router.patch("/{recipe_id}/ingredientes/{ingredient_id}", response_model=RecipeIngredientLink)
def update_ingredient_quantity(
    recipe_id: RecipeId,
    ingredient_id: IngredientId,
    body: QuantityUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> RecipeIngredient:
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    link = _find_association(recipe, ingredient_id)
    with transaction(db):
        link.quantity = body.quantity
    db.refresh(link)
    return link


@router.delete(
    "/{recipe_id}/ingredientes/{ingredient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def remove_ingredient(
    recipe_id: RecipeId,
    ingredient_id: IngredientId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    link = _find_association(recipe, ingredient_id)
    with transaction(db):
        recipe.ingredients.remove(link)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{recipe_id}/imagem", response_model=RecipeOut)
async def upload_image(
    recipe_id: RecipeId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[ImageStore, Depends(get_image_store)],
    file: Annotated[UploadFile, File(description="PNG, JPEG or WEBP image")],
) -> Recipe:
    """
    Attach an image to a recipe (multipart field `file`).

    The previous image, if any, is removed once the new one is recorded.
    """
    recipe = owned_or_404(db, Recipe, recipe_id, user, NOT_FOUND)
    content = await file.read(store.max_bytes + 1)
    url = store.save(content)
    previous = recipe.image_url
    try:
        with transaction(db):
            recipe.image_url = url
    except Exception:
        store.delete(url)
        raise
    store.delete(previous)
    logger.info("Recipe image updated", extra={"recipe_id": recipe_id})
    db.refresh(recipe)
    return recipe
