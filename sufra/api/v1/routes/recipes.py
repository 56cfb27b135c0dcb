"""Recipe route handlers.

Public browsing, owner submissions and revision history.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.recipe_request import (
    RecipeCreateRequest,
    RecipeUpdateRequest,
)
from sufra.api.v1.schemas.response.common_response import MessageResponse
from sufra.deps.auth import OptionalActor, RequiredActor
from sufra.deps.db import get_db
from sufra.enums.difficulty_level_enum import DifficultyLevelEnum
from sufra.services.recipe_presenter import recipe_moderation_view
from sufra.services.recipe_service import PUBLIC_PAGE_SIZE, RecipeFilters, RecipeService

router = APIRouter(prefix="/v1/recipes", tags=["recipes"])

Db = Annotated[Session, Depends(get_db)]


@router.get("", summary="Browse approved recipes")
def list_recipes(
    db: Db,
    search: str | None = None,
    city: Annotated[str | None, Query(description="City slug")] = None,
    difficulty: DifficultyLevelEnum | None = None,
    tags: Annotated[list[str] | None, Query(description="Tag slugs")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
) -> dict[str, Any]:
    filters = RecipeFilters(
        search=search,
        city_slug=city,
        difficulty=difficulty,
        tag_slugs=tuple(tags or ()),
    )
    return RecipeService(db).list_public(filters, page=page, per_page=PUBLIC_PAGE_SIZE)


@router.get("/mine", summary="Recipes submitted by the current user")
def my_recipes(db: Db, actor: RequiredActor) -> list[dict[str, Any]]:
    return RecipeService(db).my_recipes(actor)


@router.get("/random", summary="Random approved recipes")
def random_recipes(
    db: Db,
    exclude: Annotated[
        list[int] | None, Query(description="Ingredient ids to avoid")
    ] = None,
) -> list[dict[str, Any]]:
    return RecipeService(db).randomize(exclude or [])


@router.get("/{slug}", summary="Show one recipe")
def show_recipe(slug: str, db: Db, actor: OptionalActor) -> dict[str, Any]:
    return RecipeService(db).show(slug, actor)


@router.get("/{slug}/variations", summary="Other recipes with the same name")
def recipe_variations(slug: str, db: Db, actor: OptionalActor) -> list[dict[str, Any]]:
    return RecipeService(db).variations(slug, actor)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Submit a recipe")
def create_recipe(
    body: RecipeCreateRequest, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    return recipe_moderation_view(RecipeService(db).create(body, actor))


@router.patch("/{recipe_id}", summary="Edit a recipe")
def update_recipe(
    recipe_id: int, body: RecipeUpdateRequest, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    return recipe_moderation_view(RecipeService(db).update(recipe_id, body, actor))


@router.post("/{recipe_id}/unpublish", summary="Take your own recipe offline")
def unpublish_recipe(recipe_id: int, db: Db, actor: RequiredActor) -> dict[str, Any]:
    return recipe_moderation_view(RecipeService(db).unpublish_own(recipe_id, actor))


@router.delete("/{recipe_id}", summary="Delete a recipe")
def delete_recipe(recipe_id: int, db: Db, actor: RequiredActor) -> MessageResponse:
    RecipeService(db).delete(recipe_id, actor)
    return MessageResponse(message="Recipe deleted.")


@router.get("/{recipe_id}/history", summary="Revision history, newest first")
def recipe_history(
    recipe_id: int, db: Db, actor: RequiredActor
) -> list[dict[str, Any]]:
    return RecipeService(db).history(recipe_id, actor)


@router.delete("/{recipe_id}/history", summary="Clear revision history")
def clear_recipe_history(
    recipe_id: int, db: Db, actor: RequiredActor
) -> MessageResponse:
    deleted = RecipeService(db).clear_history(recipe_id, actor)
    return MessageResponse(message=f"Deleted {deleted} revisions.", count=deleted)


@router.post(
    "/{recipe_id}/history/{revision_id}/restore",
    summary="Restore a recipe to an earlier revision",
)
def restore_recipe_revision(
    recipe_id: int, revision_id: int, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    recipe = RecipeService(db).restore_revision(recipe_id, revision_id, actor)
    return recipe_moderation_view(recipe)
