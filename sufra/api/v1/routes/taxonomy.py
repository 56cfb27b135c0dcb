"""Public reference data: cities, tags, ingredients and user pages."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sufra.deps.auth import RequiredActor
from sufra.deps.db import get_db
from sufra.services.city_service import CityService, city_view
from sufra.services.ingredient_service import IngredientService
from sufra.services.recipe_service import RecipeService
from sufra.services.tag_service import TagService

router = APIRouter(prefix="/v1", tags=["taxonomy"])

Db = Annotated[Session, Depends(get_db)]


@router.get("/cities", summary="Cities with approved recipe counts")
def list_cities(db: Db) -> list[dict[str, Any]]:
    return CityService(db).list_cities(approved_only=True)


@router.get("/cities/{slug}", summary="Show a city")
def show_city(slug: str, db: Db) -> dict[str, Any]:
    return city_view(CityService(db).get_by_slug(slug))


@router.get("/tags", summary="Tags with recipe counts")
def list_tags(db: Db) -> list[dict[str, Any]]:
    return TagService(db).list_tags()


@router.get("/ingredients/search", summary="Ingredient autocomplete")
def search_ingredients(
    db: Db,
    actor: RequiredActor,
    q: Annotated[str, Query(min_length=1, max_length=100)],
) -> list[dict[str, Any]]:
    return [
        {"id": ingredient.id, "name": ingredient.name}
        for ingredient in IngredientService(db).search(q)
    ]


@router.get("/users/{user_id}/recipes", summary="Approved recipes of a user")
def user_recipes(user_id: int, db: Db) -> list[dict[str, Any]]:
    return RecipeService(db).user_recipes(user_id)
