"""Back office route handlers.

Moderators may review content; deleting content and managing users, taxonomy and
settings needs an admin. Role checks are repeated inside the services.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.admin_request import (
    AuthorRequest,
    AuthorUpdateRequest,
    BanUserRequest,
    CityRequest,
    CityUpdateRequest,
    DeleteUserRequest,
    IdsRequest,
    NameRequest,
    ReportBulkActionRequest,
    ReportUpdateRequest,
    SettingsUpdateRequest,
    UserBulkActionRequest,
    UserRoleRequest,
)
from sufra.api.v1.schemas.request.list_request import ListBulkActionRequest
from sufra.api.v1.schemas.request.recipe_request import (
    RecipeBulkActionRequest,
    RejectRecipeRequest,
)
from sufra.api.v1.schemas.response.common_response import MessageResponse
from sufra.deps.auth import AdminActor, ModeratorActor
from sufra.deps.db import get_db
from sufra.enums.list_status_enum import ListStatusEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.enums.report_enums import ReportStatusEnum, ReportTypeEnum
from sufra.services.author_service import AuthorService
from sufra.services.city_service import CityService, city_view
from sufra.services.ingredient_service import IngredientService
from sufra.services.list_service import ListService, list_view
from sufra.services.list_state_machine import ListTransition
from sufra.services.recipe_moderation_service import RecipeModerationService
from sufra.services.recipe_presenter import recipe_moderation_view
from sufra.services.report_service import ReportService
from sufra.services.settings_service import PlatformSettings, SettingsService
from sufra.services.tag_service import TagService
from sufra.services.user_admin_service import UserAdminService, user_view

router = APIRouter(prefix="/v1/admin", tags=["admin"])

Db = Annotated[Session, Depends(get_db)]


def settings_view(platform: PlatformSettings) -> dict[str, Any]:
    """Platform settings with the API key reduced to its last four characters."""
    view = platform.model_dump()
    key = platform.gemini_api_key
    view["gemini_api_key"] = f"...{key[-4:]}" if key else None
    view["has_ai_credentials"] = platform.has_ai_credentials
    return view


# Dashboard


@router.get("/dashboard", summary="Back office counters")
def dashboard(db: Db, actor: ModeratorActor) -> dict[str, Any]:
    return RecipeModerationService(db).dashboard_stats(actor)


# Recipes


@router.get("/recipes/pending", summary="Recipes waiting for review")
def pending_recipes(db: Db, actor: ModeratorActor) -> list[dict[str, Any]]:
    return RecipeModerationService(db).pending_queue(actor)


@router.get("/recipes", summary="All recipes")
def admin_recipes(
    db: Db,
    actor: ModeratorActor,
    status_filter: Annotated[RecipeStatusEnum | None, Query(alias="status")] = None,
    city_id: int | None = None,
    search: str | None = None,
    sort: str = "newest",
    page: Annotated[int, Query(ge=1)] = 1,
) -> dict[str, Any]:
    return RecipeModerationService(db).index(
        actor,
        status=status_filter,
        city_id=city_id,
        search=search,
        sort=sort,
        page=page,
    )


@router.post("/recipes/{recipe_id}/approve", summary="Approve a recipe")
def approve_recipe(recipe_id: int, db: Db, actor: ModeratorActor) -> dict[str, Any]:
    return recipe_moderation_view(RecipeModerationService(db).approve(recipe_id, actor))


@router.post("/recipes/{recipe_id}/reject", summary="Reject a recipe")
def reject_recipe(
    recipe_id: int, body: RejectRecipeRequest, db: Db, actor: ModeratorActor
) -> dict[str, Any]:
    recipe = RecipeModerationService(db).reject(recipe_id, body.reason, actor)
    return recipe_moderation_view(recipe)


@router.post("/recipes/{recipe_id}/unpublish", summary="Unpublish a recipe")
def unpublish_recipe(recipe_id: int, db: Db, actor: ModeratorActor) -> dict[str, Any]:
    recipe = RecipeModerationService(db).unpublish(recipe_id, actor)
    return recipe_moderation_view(recipe)


@router.post("/recipes/bulk", summary="Apply one action to many recipes")
def bulk_recipes(
    body: RecipeBulkActionRequest, db: Db, actor: ModeratorActor
) -> MessageResponse:
    result = RecipeModerationService(db).bulk(
        body.ids, body.action, actor, status=body.status, reason=body.reason
    )
    return MessageResponse(**result)


# Lists


@router.get("/lists/review", summary="Lists waiting for review")
def lists_in_review(db: Db, actor: ModeratorActor) -> list[dict[str, Any]]:
    return ListService(db).review_queue(actor)


@router.get("/lists", summary="All non-default lists")
def admin_lists(
    db: Db,
    actor: ModeratorActor,
    status_filter: Annotated[ListStatusEnum | None, Query(alias="status")] = None,
) -> list[dict[str, Any]]:
    return ListService(db).admin_index(actor, status_filter)


@router.post("/lists/{list_id}/approve", summary="Approve a list")
def approve_list(list_id: int, db: Db, actor: ModeratorActor) -> dict[str, Any]:
    return list_view(ListService(db).moderate(list_id, ListTransition.APPROVE, actor))


@router.post("/lists/{list_id}/reject", summary="Reject a list")
def reject_list(list_id: int, db: Db, actor: ModeratorActor) -> dict[str, Any]:
    return list_view(ListService(db).moderate(list_id, ListTransition.REJECT, actor))


@router.post("/lists/{list_id}/unpublish", summary="Make a list private")
def unpublish_list(list_id: int, db: Db, actor: ModeratorActor) -> dict[str, Any]:
    return list_view(ListService(db).moderate(list_id, ListTransition.UNPUBLISH, actor))


@router.post("/lists/bulk", summary="Apply one action to many lists")
def bulk_lists(
    body: ListBulkActionRequest, db: Db, actor: ModeratorActor
) -> MessageResponse:
    return MessageResponse(**ListService(db).bulk(body.ids, body.action, actor))


# Users


@router.get("/users", summary="Users")
def admin_users(
    db: Db, actor: AdminActor, search: str | None = None
) -> list[dict[str, Any]]:
    return UserAdminService(db).index(actor, search)


@router.put("/users/{user_id}/role", summary="Change a user's role")
def change_role(
    user_id: int, body: UserRoleRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    return user_view(UserAdminService(db).change_role(user_id, body.role, actor))


@router.post("/users/{user_id}/ban", summary="Ban a user")
def ban_user(
    user_id: int, body: BanUserRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    return user_view(UserAdminService(db).ban(user_id, body.reason, actor))


@router.post("/users/{user_id}/unban", summary="Lift a ban")
def unban_user(user_id: int, db: Db, actor: AdminActor) -> dict[str, Any]:
    return user_view(UserAdminService(db).unban(user_id, actor))


@router.post("/users/{user_id}/delete", summary="Delete a user")
def delete_user(
    user_id: int, body: DeleteUserRequest, db: Db, actor: AdminActor
) -> MessageResponse:
    UserAdminService(db).delete(
        user_id,
        actor,
        transfer_to_user_id=body.transfer_to_user_id,
        transfer_to_author_name=body.transfer_to_author_name,
    )
    return MessageResponse(message="User deleted.")


@router.post("/users/bulk", summary="Apply one action to many users")
def bulk_users(
    body: UserBulkActionRequest, db: Db, actor: AdminActor
) -> MessageResponse:
    result = UserAdminService(db).bulk(body.ids, body.action, actor, body.reason)
    return MessageResponse(**result)


# Cities


@router.get("/cities", summary="All cities with recipe counts")
def admin_cities(db: Db, actor: AdminActor) -> list[dict[str, Any]]:
    return CityService(db).list_cities(approved_only=False)


@router.post("/cities", status_code=status.HTTP_201_CREATED, summary="Create a city")
def create_city(body: CityRequest, db: Db, actor: AdminActor) -> dict[str, Any]:
    city = CityService(db).create(body.name, body.description, body.image_path)
    return city_view(city)


@router.patch("/cities/{city_id}", summary="Edit a city")
def update_city(
    city_id: int, body: CityUpdateRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    city = CityService(db).update(city_id, body.model_dump(exclude_unset=True))
    return city_view(city)


@router.delete("/cities/{city_id}", summary="Delete a city")
def delete_city(city_id: int, db: Db, actor: AdminActor) -> MessageResponse:
    moved = CityService(db).delete(city_id)
    return MessageResponse(
        message=f"City deleted; {moved} recipes moved to the default city.",
        count=moved,
    )


@router.post("/cities/bulk-delete", summary="Delete many cities")
def bulk_delete_cities(body: IdsRequest, db: Db, actor: AdminActor) -> MessageResponse:
    moved = CityService(db).delete_many(body.ids)
    return MessageResponse(
        message=f"Cities deleted; {moved} recipes moved to the default city.",
        count=moved,
    )


# Tags


@router.get("/tags", summary="All tags")
def admin_tags(
    db: Db, actor: AdminActor, search: str | None = None
) -> list[dict[str, Any]]:
    return TagService(db).list_tags(search)


@router.post("/tags", status_code=status.HTTP_201_CREATED, summary="Create a tag")
def create_tag(body: NameRequest, db: Db, actor: AdminActor) -> dict[str, Any]:
    tag = TagService(db).create(body.name)
    return {"id": tag.id, "name": tag.name, "slug": tag.slug}


@router.patch("/tags/{tag_id}", summary="Rename a tag")
def update_tag(
    tag_id: int, body: NameRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    tag = TagService(db).update(tag_id, body.name)
    return {"id": tag.id, "name": tag.name, "slug": tag.slug}


@router.post("/tags/bulk-delete", summary="Delete tags")
def bulk_delete_tags(body: IdsRequest, db: Db, actor: AdminActor) -> MessageResponse:
    count = TagService(db).delete_many(body.ids)
    return MessageResponse(message=f"Deleted {count} tags.", count=count)


# Ingredients


@router.get("/ingredients", summary="Ingredients with usage counts")
def admin_ingredients(
    db: Db, actor: AdminActor, search: str | None = None
) -> list[dict[str, Any]]:
    return IngredientService(db).list_with_usage(search)


@router.patch("/ingredients/{ingredient_id}", summary="Rename an ingredient")
def rename_ingredient(
    ingredient_id: int, body: NameRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    ingredient = IngredientService(db).rename(ingredient_id, body.name)
    return {
        "id": ingredient.id,
        "name": ingredient.name,
        "normalized_name": ingredient.normalized_name,
    }


@router.delete("/ingredients/{ingredient_id}", summary="Delete an ingredient")
def delete_ingredient(ingredient_id: int, db: Db, actor: AdminActor) -> MessageResponse:
    IngredientService(db).delete_many([ingredient_id])
    return MessageResponse(message="Ingredient deleted.", count=1)


@router.post("/ingredients/bulk-delete", summary="Delete ingredients")
def bulk_delete_ingredients(
    body: IdsRequest, db: Db, actor: AdminActor
) -> MessageResponse:
    count = IngredientService(db).delete_many(body.ids)
    return MessageResponse(message=f"Deleted {count} ingredients.", count=count)


# Anonymous authors


@router.get("/authors", summary="Anonymous authors")
def admin_authors(db: Db, actor: ModeratorActor) -> list[dict[str, Any]]:
    return AuthorService(db).list_authors()


@router.post(
    "/authors", status_code=status.HTTP_201_CREATED, summary="Create an author"
)
def create_author(body: AuthorRequest, db: Db, actor: AdminActor) -> dict[str, Any]:
    author = AuthorService(db).create(body.name, body.bio)
    return {"id": author.id, "name": author.name, "bio": author.bio}


@router.patch("/authors/{author_id}", summary="Edit an author")
def update_author(
    author_id: int, body: AuthorUpdateRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    author = AuthorService(db).update(author_id, body.name, body.bio)
    return {"id": author.id, "name": author.name, "bio": author.bio}


@router.delete("/authors/{author_id}", summary="Delete an author")
def delete_author(author_id: int, db: Db, actor: AdminActor) -> MessageResponse:
    AuthorService(db).delete(author_id)
    return MessageResponse(message="Author deleted.")


# Reports


@router.get("/reports", summary="Reports")
def admin_reports(
    db: Db,
    actor: ModeratorActor,
    status_filter: Annotated[ReportStatusEnum | None, Query(alias="status")] = None,
    report_type: Annotated[ReportTypeEnum | None, Query(alias="type")] = None,
) -> list[dict[str, Any]]:
    return ReportService(db).index(actor, status_filter, report_type)


@router.patch("/reports/{report_id}", summary="Triage a report")
def update_report(
    report_id: int, body: ReportUpdateRequest, db: Db, actor: ModeratorActor
) -> dict[str, Any]:
    service = ReportService(db)
    report = service.update(report_id, body.model_dump(exclude_unset=True), actor)
    return service.show(report)


@router.delete("/reports/{report_id}", summary="Delete a report")
def delete_report(report_id: int, db: Db, actor: AdminActor) -> MessageResponse:
    ReportService(db).delete(report_id, actor)
    return MessageResponse(message="Report deleted.")


@router.post("/reports/bulk", summary="Apply one action to many reports")
def bulk_reports(
    body: ReportBulkActionRequest, db: Db, actor: ModeratorActor
) -> MessageResponse:
    result = ReportService(db).bulk(body.ids, body.action, actor, body.status)
    return MessageResponse(**result)


# Settings


@router.get("/settings", summary="Platform settings")
def get_settings_view(db: Db, actor: AdminActor) -> dict[str, Any]:
    return settings_view(SettingsService(db).load())


@router.patch("/settings", summary="Update platform settings")
def update_settings(
    body: SettingsUpdateRequest, db: Db, actor: AdminActor
) -> dict[str, Any]:
    platform = SettingsService(db).update(body.model_dump(exclude_unset=True))
    return settings_view(platform)
