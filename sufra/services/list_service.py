"""Recipe lists.

Every user owns one default list (their favorites), created the first time it is
needed. Other lists can be sent for review and, once approved, are public.
"""

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.list_request import (
    ListCreateRequest,
    ListUpdateRequest,
)
from sufra.core.logging import get_logger
from sufra.db.models.list_models.list_item import ListItem
from sufra.db.models.list_models.recipe_list import RecipeList
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.report_models.report import Report
from sufra.db.models.user_models.user import User
from sufra.enums.bulk_action_enums import ListBulkActionEnum
from sufra.enums.list_status_enum import ListStatusEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.enums.report_enums import ReportableTypeEnum
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from sufra.services.list_state_machine import (
    ListTransition,
    apply_list_transition,
    ensure_not_public_default,
    is_publicly_visible,
)
from sufra.services.recipe_presenter import recipe_card
from sufra.services.recipe_service import RecipeService
from sufra.utils.media_storage import delete_media, media_url
from sufra.utils.slugify import slugify, unique_slug

_log = get_logger(__name__)

DEFAULT_LIST_NAME = "المفضلة"
DEFAULT_LIST_SLUG = "favorites"


def list_view(recipe_list: RecipeList, *, with_recipes: bool = False) -> dict[str, Any]:
    """Representation of a list; recipes only for the detail view."""
    view: dict[str, Any] = {
        "id": recipe_list.id,
        "user_id": recipe_list.user_id,
        "owner_name": recipe_list.user.public_name if recipe_list.user else None,
        "name": recipe_list.name,
        "slug": recipe_list.slug,
        "description": recipe_list.description,
        "cover_image_url": media_url(recipe_list.cover_image),
        "is_default": recipe_list.is_default,
        "is_public": recipe_list.is_public,
        "status": recipe_list.status.value,
        "recipes_count": recipe_list.recipe_count,
        "created_at": recipe_list.created_at.isoformat(),
    }
    if with_recipes:
        view["recipes"] = [
            recipe_card(item.recipe)
            for item in recipe_list.items
            if item.recipe.status == RecipeStatusEnum.APPROVED
        ]
    return view


class ListService:
    """Owner and moderator operations on recipe lists."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    # Lookups

    def get(self, list_id: int) -> RecipeList:
        recipe_list = self.db.get(RecipeList, list_id)
        if recipe_list is None:
            raise NotFoundError("List", list_id)
        return recipe_list

    def get_owned(self, list_id: int, actor: User) -> RecipeList:
        """Return the list when ``actor`` owns it, NotFoundError otherwise."""
        recipe_list = self.get(list_id)
        if recipe_list.user_id != actor.id:
            raise NotFoundError("List", list_id)
        return recipe_list

    def default_list(self, user: User) -> RecipeList:
        """Return the user's favorites list, creating it on first use."""
        recipe_list = (
            self.db.query(RecipeList)
            .filter(RecipeList.user_id == user.id, RecipeList.is_default.is_(True))
            .one_or_none()
        )
        if recipe_list is not None:
            return recipe_list
        slug_taken = (
            self.db.query(RecipeList.id)
            .filter(RecipeList.user_id == user.id, RecipeList.slug == DEFAULT_LIST_SLUG)
            .first()
        )
        recipe_list = RecipeList(
            user_id=user.id,
            name=DEFAULT_LIST_NAME,
            slug=unique_slug(DEFAULT_LIST_SLUG) if slug_taken else DEFAULT_LIST_SLUG,
            is_default=True,
            is_public=False,
            status=ListStatusEnum.PRIVATE,
        )
        try:
            with self.db.begin_nested():
                self.db.add(recipe_list)
        except IntegrityError:
            # Created concurrently by another request
            existing = (
                self.db.query(RecipeList)
                .filter(RecipeList.user_id == user.id, RecipeList.is_default.is_(True))
                .one_or_none()
            )
            if existing is None:
                raise
            return existing
        _log.info("Created default list {} for user {}", recipe_list.id, user.id)
        return recipe_list

    def _recipe(self, recipe_id: int, actor: User) -> Recipe:
        recipe = self.db.get(Recipe, recipe_id)
        if recipe is None or not RecipeService.can_view(recipe, actor):
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def _slug_for(self, user_id: int, name: str, exclude_id: int | None = None) -> str:
        """Slug for a user list; never the slug kept for the favorites list."""
        slug = slugify(name)
        if slug == DEFAULT_LIST_SLUG:
            return unique_slug(name)
        query = self.db.query(RecipeList.id).filter(
            RecipeList.user_id == user_id, RecipeList.slug == slug
        )
        if exclude_id is not None:
            query = query.filter(RecipeList.id != exclude_id)
        return unique_slug(name) if query.first() is not None else slug

    # Owner operations

    def index(self, actor: User) -> list[dict[str, Any]]:
        """The actor's lists, default list first."""
        self.default_list(actor)
        self.db.commit()
        lists = (
            self.db.query(RecipeList)
            .filter(RecipeList.user_id == actor.id)
            .order_by(RecipeList.is_default.desc(), RecipeList.created_at.desc())
            .all()
        )
        return [list_view(recipe_list) for recipe_list in lists]

    def create(self, data: ListCreateRequest, actor: User) -> RecipeList:
        recipe_list = RecipeList(
            user_id=actor.id,
            name=data.name,
            slug=self._slug_for(actor.id, data.name),
            description=data.description,
            cover_image=data.cover_image,
            is_default=False,
            is_public=False,
            status=ListStatusEnum.DRAFT,
        )
        self.db.add(recipe_list)
        self.db.commit()
        _log.info("User {} created list {}", actor.id, recipe_list.id)
        return recipe_list

    def show(self, list_id: int, actor: User | None) -> dict[str, Any]:
        """A list with its recipes, or NotFoundError when hidden from ``actor``."""
        recipe_list = self.get(list_id)
        if not is_publicly_visible(recipe_list):
            allowed = actor is not None and (
                recipe_list.user_id == actor.id or actor.can_approve_recipes
            )
            if not allowed:
                raise NotFoundError("List", list_id)
        return list_view(recipe_list, with_recipes=True)

    def update(self, list_id: int, data: ListUpdateRequest, actor: User) -> RecipeList:
        """Edit a list.

        ``is_public=true`` on an approved-then-private list republishes it,
        ``is_public=false`` on an approved list unpublishes it. Any other route to
        public visibility goes through ``request_publish``.
        """
        recipe_list = self.get_owned(list_id, actor)
        fields = data.model_fields_set
        if "is_public" in fields and data.is_public is not None:
            ensure_not_public_default(recipe_list, data.is_public)

        if "name" in fields and data.name:
            if recipe_list.is_default:
                raise ValidationError.for_field(
                    "name", "The default list cannot be renamed."
                )
            if data.name != recipe_list.name:
                recipe_list.name = data.name
                recipe_list.slug = self._slug_for(actor.id, data.name, list_id)
        if "description" in fields:
            recipe_list.description = data.description
        previous_cover = None
        if "cover_image" in fields and data.cover_image != recipe_list.cover_image:
            previous_cover = recipe_list.cover_image
            recipe_list.cover_image = data.cover_image

        if "is_public" in fields and data.is_public is not None:
            if data.is_public and recipe_list.status == ListStatusEnum.PRIVATE:
                apply_list_transition(recipe_list, ListTransition.REPUBLISH)
            elif not data.is_public and recipe_list.status == ListStatusEnum.APPROVED:
                apply_list_transition(recipe_list, ListTransition.UNPUBLISH)
            elif data.is_public and recipe_list.status != ListStatusEnum.APPROVED:
                raise ValidationError.for_field(
                    "is_public", "The list must be approved before it can be public."
                )
        if data.request_publish:
            apply_list_transition(recipe_list, ListTransition.REQUEST_PUBLISH)

        self.db.commit()
        delete_media(previous_cover)
        return recipe_list

    def request_publish(self, list_id: int, actor: User) -> RecipeList:
        recipe_list = self.get_owned(list_id, actor)
        apply_list_transition(recipe_list, ListTransition.REQUEST_PUBLISH)
        self.db.commit()
        _log.info("List {} sent for review by user {}", list_id, actor.id)
        return recipe_list

    def unpublish(self, list_id: int, actor: User) -> RecipeList:
        """Take an approved list private, as its owner or a moderator."""
        recipe_list = self.get(list_id)
        if recipe_list.user_id != actor.id and not actor.can_approve_recipes:
            raise NotFoundError("List", list_id)
        apply_list_transition(recipe_list, ListTransition.UNPUBLISH)
        self.db.commit()
        _log.info("List {} unpublished by user {}", list_id, actor.id)
        return recipe_list

    def destroy(self, list_id: int, actor: User) -> None:
        recipe_list = self.get_owned(list_id, actor)
        if recipe_list.is_default:
            raise ValidationError.for_field(
                "list", "The default list cannot be deleted."
            )
        covers = self._delete_rows([recipe_list])
        self.db.commit()
        for cover in covers:
            delete_media(cover)
        _log.info("User {} deleted list {}", actor.id, list_id)

    def add_recipe(self, list_id: int, recipe_id: int, actor: User) -> RecipeList:
        recipe_list = self.get_owned(list_id, actor)
        self._recipe(recipe_id, actor)
        if not recipe_list.contains(recipe_id):
            self._append(recipe_list, recipe_id)
        self.db.commit()
        return recipe_list

    def remove_recipe(self, list_id: int, recipe_id: int, actor: User) -> RecipeList:
        recipe_list = self.get_owned(list_id, actor)
        self._remove(recipe_list, recipe_id)
        self.db.commit()
        return recipe_list

    def toggle_recipe(self, list_id: int, recipe_id: int, actor: User) -> bool:
        """Add the recipe if absent, remove it if present.

        Returns:
            bool: Whether the recipe is in the list afterwards.
        """
        recipe_list = self.get_owned(list_id, actor)
        return self._toggle(recipe_list, recipe_id, actor)

    def favorites_toggle(self, recipe_id: int, actor: User) -> bool:
        """Toggle a recipe in the actor's default list."""
        return self._toggle(self.default_list(actor), recipe_id, actor)

    def _toggle(self, recipe_list: RecipeList, recipe_id: int, actor: User) -> bool:
        if recipe_list.contains(recipe_id):
            self._remove(recipe_list, recipe_id)
            present = False
        else:
            self._recipe(recipe_id, actor)
            self._append(recipe_list, recipe_id)
            present = True
        self.db.commit()
        _log.debug(
            "Recipe {} {} list {}",
            recipe_id,
            "added to" if present else "removed from",
            recipe_list.id,
        )
        return present

    def _append(self, recipe_list: RecipeList, recipe_id: int) -> None:
        positions = [item.position for item in recipe_list.items]
        next_position = max(positions, default=-1) + 1
        recipe_list.items.append(ListItem(recipe_id=recipe_id, position=next_position))
        self.db.flush()

    def _remove(self, recipe_list: RecipeList, recipe_id: int) -> None:
        for item in list(recipe_list.items):
            if item.recipe_id == recipe_id:
                recipe_list.items.remove(item)
        self.db.flush()

    def public_index(self) -> list[dict[str, Any]]:
        """Approved public lists, newest first."""
        lists = (
            self.db.query(RecipeList)
            .filter(
                RecipeList.is_public.is_(True),
                RecipeList.status == ListStatusEnum.APPROVED,
                RecipeList.is_default.is_(False),
            )
            .order_by(RecipeList.updated_at.desc(), RecipeList.id.desc())
            .all()
        )
        return [list_view(recipe_list) for recipe_list in lists]

    # Moderation

    def review_queue(self, actor: User) -> list[dict[str, Any]]:
        """Lists waiting for review, oldest first."""
        self._ensure_moderator(actor)
        lists = (
            self.db.query(RecipeList)
            .filter(RecipeList.status == ListStatusEnum.REVIEW)
            .order_by(RecipeList.updated_at.asc(), RecipeList.id.asc())
            .all()
        )
        return [list_view(recipe_list) for recipe_list in lists]

    def admin_index(
        self, actor: User, status: ListStatusEnum | None = None
    ) -> list[dict[str, Any]]:
        """Every non-default list, optionally filtered by status."""
        self._ensure_moderator(actor)
        query = self.db.query(RecipeList).filter(RecipeList.is_default.is_(False))
        if status is not None:
            query = query.filter(RecipeList.status == ListStatusEnum(status))
        lists = query.order_by(RecipeList.created_at.desc(), RecipeList.id.desc()).all()
        return [list_view(recipe_list) for recipe_list in lists]

    def moderate(
        self, list_id: int, transition: ListTransition, actor: User
    ) -> RecipeList:
        self._ensure_moderator(actor)
        recipe_list = self.get(list_id)
        apply_list_transition(recipe_list, transition)
        self.db.commit()
        _log.info("List {} {} by user {}", list_id, transition.value, actor.id)
        return recipe_list

    def bulk(
        self, ids: list[int], action: ListBulkActionEnum, actor: User
    ) -> dict[str, Any]:
        """Apply one action to many lists, all or nothing."""
        action = ListBulkActionEnum(action)
        if action == ListBulkActionEnum.DELETE:
            if not actor.can_delete_recipes:
                raise AuthorizationError(f"User {actor.id} may not delete lists")
        else:
            self._ensure_moderator(actor)

        unique_ids = list(dict.fromkeys(ids))
        lists = self.db.query(RecipeList).filter(RecipeList.id.in_(unique_ids)).all()
        if len(lists) != len(unique_ids):
            raise ValidationError.for_field("ids", "Some lists do not exist.")

        covers: list[str | None] = []
        try:
            if action == ListBulkActionEnum.DELETE:
                if any(recipe_list.is_default for recipe_list in lists):
                    raise ValidationError.for_field(
                        "ids", "Default lists cannot be deleted."
                    )
                covers = self._delete_rows(lists)
            else:
                transition = ListTransition(action.value)
                for recipe_list in lists:
                    apply_list_transition(recipe_list, transition)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for cover in covers:
            delete_media(cover)
        _log.info("User {} applied {} to lists {}", actor.id, action.value, unique_ids)
        return {
            "message": f"Applied {action.value} to {len(lists)} lists.",
            "count": len(lists),
        }

    def _delete_rows(self, lists: list[RecipeList]) -> list[str | None]:
        """Delete lists and the reports about them; return their cover images."""
        ids = [recipe_list.id for recipe_list in lists]
        self.db.query(Report).filter(
            Report.reportable_type == ReportableTypeEnum.LIST,
            Report.reportable_id.in_(ids),
        ).delete(synchronize_session=False)
        covers = [recipe_list.cover_image for recipe_list in lists]
        for recipe_list in lists:
            self.db.delete(recipe_list)
        self.db.flush()
        return covers

    @staticmethod
    def _ensure_moderator(actor: User) -> None:
        if not actor.can_approve_recipes:
            raise AuthorizationError(f"User {actor.id} may not moderate lists")

