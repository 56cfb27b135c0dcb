"""Recipe list route handlers."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.list_request import (
    ListCreateRequest,
    ListRecipeRequest,
    ListUpdateRequest,
)
from sufra.api.v1.schemas.response.common_response import (
    MessageResponse,
    ToggleResponse,
)
from sufra.deps.auth import OptionalActor, RequiredActor
from sufra.deps.db import get_db
from sufra.services.list_service import ListService, list_view

router = APIRouter(prefix="/v1/lists", tags=["lists"])

Db = Annotated[Session, Depends(get_db)]


@router.get("", summary="The current user's lists")
def my_lists(db: Db, actor: RequiredActor) -> list[dict[str, Any]]:
    return ListService(db).index(actor)


@router.get("/public", summary="Approved public lists")
def public_lists(db: Db) -> list[dict[str, Any]]:
    return ListService(db).public_index()


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a list")
def create_list(
    body: ListCreateRequest, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    return list_view(ListService(db).create(body, actor))


@router.post("/favorites/{recipe_id}", summary="Toggle a recipe in favorites")
def toggle_favorite(recipe_id: int, db: Db, actor: RequiredActor) -> ToggleResponse:
    service = ListService(db)
    in_list = service.favorites_toggle(recipe_id, actor)
    return ToggleResponse(
        list_id=service.default_list(actor).id, recipe_id=recipe_id, in_list=in_list
    )


@router.get("/{list_id}", summary="Show a list with its recipes")
def show_list(list_id: int, db: Db, actor: OptionalActor) -> dict[str, Any]:
    return ListService(db).show(list_id, actor)


@router.patch("/{list_id}", summary="Edit a list")
def update_list(
    list_id: int, body: ListUpdateRequest, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    return list_view(ListService(db).update(list_id, body, actor))


@router.post("/{list_id}/request-publish", summary="Send a list for review")
def request_publish(list_id: int, db: Db, actor: RequiredActor) -> dict[str, Any]:
    return list_view(ListService(db).request_publish(list_id, actor))


@router.post("/{list_id}/unpublish", summary="Make an approved list private")
def unpublish_list(list_id: int, db: Db, actor: RequiredActor) -> dict[str, Any]:
    return list_view(ListService(db).unpublish(list_id, actor))


@router.delete("/{list_id}", summary="Delete a list")
def delete_list(list_id: int, db: Db, actor: RequiredActor) -> MessageResponse:
    ListService(db).destroy(list_id, actor)
    return MessageResponse(message="List deleted.")


@router.post("/{list_id}/recipes", summary="Add a recipe to a list")
def add_recipe(
    list_id: int, body: ListRecipeRequest, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    return list_view(ListService(db).add_recipe(list_id, body.recipe_id, actor))


@router.delete("/{list_id}/recipes/{recipe_id}", summary="Remove a recipe from a list")
def remove_recipe(
    list_id: int, recipe_id: int, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    return list_view(ListService(db).remove_recipe(list_id, recipe_id, actor))


@router.post("/{list_id}/recipes/{recipe_id}/toggle", summary="Toggle a recipe")
def toggle_recipe(
    list_id: int, recipe_id: int, db: Db, actor: RequiredActor
) -> ToggleResponse:
    in_list = ListService(db).toggle_recipe(list_id, recipe_id, actor)
    return ToggleResponse(list_id=list_id, recipe_id=recipe_id, in_list=in_list)
