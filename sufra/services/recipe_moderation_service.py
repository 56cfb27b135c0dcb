"""Back office moderation of recipes.

Single and bulk actions go through the same ``apply_transition`` as the owner paths.
A bulk batch runs in one transaction: if any recipe cannot make the transition, nothing
is written.
"""

from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.helpers import page_payload, paginate
from sufra.db.models.list_models.recipe_list import RecipeList
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.report_models.report import Report
from sufra.db.models.taxonomy_models.city import City
from sufra.db.models.user_models.user import User
from sufra.enums.bulk_action_enums import RecipeBulkActionEnum
from sufra.enums.list_status_enum import ListStatusEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.enums.report_enums import ReportStatusEnum
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    ValidationError,
)
from sufra.services.recipe_presenter import recipe_moderation_view
from sufra.services.recipe_service import RecipeService
from sufra.services.recipe_state_machine import (
    RecipeTransition,
    apply_transition,
    validate_rejection_reason,
)
from sufra.utils.media_storage import delete_media

_log = get_logger(__name__)

ADMIN_PAGE_SIZE = 20

_SORTS = {
    "newest": (Recipe.created_at.desc(), Recipe.id.desc()),
    "oldest": (Recipe.created_at.asc(), Recipe.id.asc()),
    "name": (Recipe.name.asc(), Recipe.id.asc()),
    "updated": (Recipe.updated_at.desc(), Recipe.id.desc()),
}

# Target status of change_status -> transition that reaches it
_STATUS_TRANSITIONS = {
    RecipeStatusEnum.APPROVED: RecipeTransition.APPROVE,
    RecipeStatusEnum.UNPUBLISHED: RecipeTransition.UNPUBLISH,
    RecipeStatusEnum.PENDING: RecipeTransition.RESUBMIT,
    RecipeStatusEnum.REJECTED: RecipeTransition.REJECT,
}


class RecipeModerationService:
    """Approve, reject, unpublish and bulk-manage recipes."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db
        self.recipes = RecipeService(db)

    def _ensure_moderator(self, actor: User) -> None:
        if not actor.can_approve_recipes:
            raise AuthorizationError(f"User {actor.id} may not moderate recipes")

    # Queues and listings

    def pending_queue(self, actor: User) -> list[dict[str, Any]]:
        """Recipes waiting for review, oldest first."""
        self._ensure_moderator(actor)
        recipes = (
            self.db.query(Recipe)
            .filter(
                or_(
                    Recipe.status == RecipeStatusEnum.PENDING,
                    Recipe.needs_reapproval.is_(True),
                )
            )
            .order_by(Recipe.created_at.asc(), Recipe.id.asc())
            .all()
        )
        return [recipe_moderation_view(r) for r in recipes]

    def index(
        self,
        actor: User,
        *,
        status: RecipeStatusEnum | None = None,
        city_id: int | None = None,
        search: str | None = None,
        sort: str = "newest",
        page: int = 1,
        per_page: int = ADMIN_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Every recipe, filtered for the back office table."""
        self._ensure_moderator(actor)
        if sort not in _SORTS:
            raise ValidationError.for_field(
                "sort", f"Sort must be one of: {', '.join(_SORTS)}."
            )
        query = self.db.query(Recipe)
        if status is not None:
            query = query.filter(Recipe.status == RecipeStatusEnum(status))
        if city_id is not None:
            query = query.filter(Recipe.city_id == city_id)
        if search and search.strip():
            query = query.filter(
                Recipe.name.icontains(search.strip(), autoescape=True)
            )
        recipes, total = paginate(query.order_by(*_SORTS[sort]), page, per_page)
        return page_payload(
            [recipe_moderation_view(r) for r in recipes], total, page, per_page
        )

    def dashboard_stats(self, actor: User) -> dict[str, Any]:
        """Counts shown on the back office landing page."""
        self._ensure_moderator(actor)
        by_status = dict(
            self.db.query(Recipe.status, func.count(Recipe.id))
            .group_by(Recipe.status)
            .all()
        )
        return {
            "recipes": {
                "total": sum(by_status.values()),
                **{
                    status.value: by_status.get(status, 0)
                    for status in RecipeStatusEnum
                },
                "needs_reapproval": self.db.query(Recipe)
                .filter(Recipe.needs_reapproval.is_(True))
                .count(),
            },
            "users": self.db.query(User).count(),
            "banned_users": self.db.query(User)
            .filter(User.is_banned.is_(True))
            .count(),
            "lists": self.db.query(RecipeList)
            .filter(RecipeList.is_default.is_(False))
            .count(),
            "lists_in_review": self.db.query(RecipeList)
            .filter(RecipeList.status == ListStatusEnum.REVIEW)
            .count(),
            "pending_reports": self.db.query(Report)
            .filter(Report.status == ReportStatusEnum.PENDING)
            .count(),
            "cities": self.db.query(City).count(),
        }

    # Single actions

    def approve(self, recipe_id: int, actor: User) -> Recipe:
        self._ensure_moderator(actor)
        recipe = self.recipes.get(recipe_id)
        apply_transition(recipe, RecipeTransition.APPROVE, actor)
        self.db.commit()
        _log.info("Recipe {} approved by user {}", recipe_id, actor.id)
        return recipe

    def reject(self, recipe_id: int, reason: str | None, actor: User) -> Recipe:
        self._ensure_moderator(actor)
        recipe = self.recipes.get(recipe_id)
        apply_transition(recipe, RecipeTransition.REJECT, actor, reason=reason)
        self.db.commit()
        _log.info("Recipe {} rejected by user {}", recipe_id, actor.id)
        return recipe

    def unpublish(self, recipe_id: int, actor: User) -> Recipe:
        self._ensure_moderator(actor)
        recipe = self.recipes.get(recipe_id)
        apply_transition(recipe, RecipeTransition.UNPUBLISH, actor)
        self.db.commit()
        _log.info("Recipe {} unpublished by user {}", recipe_id, actor.id)
        return recipe

    # Bulk

    def bulk(
        self,
        ids: list[int],
        action: RecipeBulkActionEnum,
        actor: User,
        *,
        status: RecipeStatusEnum | None = None,
        reason: str | None = None,
    ) -> dict[str, Any]:
        """Apply one action to many recipes, all or nothing.

        Returns:
            dict: ``{"message", "count"}``.

        Raises:
            AuthorizationError: If the actor lacks the role the action needs.
            ValidationError: For unknown ids or a missing/invalid target status.
            InvalidStateTransitionError: If any recipe cannot make the transition.
        """
        action = RecipeBulkActionEnum(action)
        if action == RecipeBulkActionEnum.DELETE:
            if not actor.can_delete_recipes:
                raise AuthorizationError(f"User {actor.id} may not delete recipes")
        else:
            self._ensure_moderator(actor)

        unique_ids = list(dict.fromkeys(ids))
        recipes = self.db.query(Recipe).filter(Recipe.id.in_(unique_ids)).all()
        if len(recipes) != len(unique_ids):
            found = {recipe.id for recipe in recipes}
            missing = [i for i in unique_ids if i not in found]
            raise ValidationError.for_field(
                "ids", f"Unknown recipe ids: {', '.join(map(str, missing))}."
            )

        if action == RecipeBulkActionEnum.DELETE:
            image_paths = [recipe.image_path for recipe in recipes]
            self.recipes.delete_rows(recipes)
            self.db.commit()
            for path in image_paths:
                delete_media(path)
            _log.info("User {} bulk deleted recipes {}", actor.id, unique_ids)
            return {
                "message": f"Deleted {len(recipes)} recipes.",
                "count": len(recipes),
            }

        transition, reason = self._bulk_transition(action, status, reason)
        try:
            for recipe in recipes:
                apply_transition(recipe, transition, actor, reason=reason)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        _log.info(
            "User {} applied {} to recipes {}", actor.id, transition.value, unique_ids
        )
        return {
            "message": f"Applied {action.value} to {len(recipes)} recipes.",
            "count": len(recipes),
        }

    @staticmethod
    def _bulk_transition(
        action: RecipeBulkActionEnum,
        status: RecipeStatusEnum | None,
        reason: str | None,
    ) -> tuple[RecipeTransition, str | None]:
        match action:
            case RecipeBulkActionEnum.PUBLISH:
                return RecipeTransition.APPROVE, None
            case RecipeBulkActionEnum.UNPUBLISH:
                return RecipeTransition.UNPUBLISH, None
            case RecipeBulkActionEnum.CHANGE_STATUS:
                if status is None:
                    raise ValidationError.for_field(
                        "status", "A target status is required."
                    )
                transition = _STATUS_TRANSITIONS[RecipeStatusEnum(status)]
                if transition == RecipeTransition.REJECT:
                    return transition, validate_rejection_reason(reason)
                return transition, None
        raise ValidationError.for_field("action", f"Unsupported action: {action}")
