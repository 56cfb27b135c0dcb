"""Recipe moderation state machine.

Every change to a recipe's status, approval metadata, rejection reason or
reapproval flag goes through ``apply_transition``. Legal transitions:

================  =======================================  ===========================
transition        allowed from                             effect
================  =======================================  ===========================
submit            new recipe                               approved for moderators,
                                                           otherwise pending
owner_edit        any                                      approved recipe edited by a
                                                           non-moderator goes back to
                                                           pending with needs_reapproval
approve           any                                      approved, approver stamped,
                                                           flag and reason cleared
reject            any                                      rejected with a reason
unpublish         approved, unpublished                    unpublished, approval kept
resubmit          any                                      pending
================  =======================================  ===========================

``needs_reapproval`` is only ever true while the recipe is pending or rejected.
"""

from datetime import datetime
from enum import Enum

from sufra.core.logging import get_logger
from sufra.db.models.base_database_model import utcnow
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.user_models.user import User
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.exceptions.custom_exceptions import (
    InvalidStateTransitionError,
    ValidationError,
)

_log = get_logger(__name__)

MAX_REJECTION_REASON_LENGTH = 500


class RecipeTransition(str, Enum):
    """Moderation transitions a recipe can go through."""

    SUBMIT = "submit"
    OWNER_EDIT = "owner_edit"
    APPROVE = "approve"
    REJECT = "reject"
    UNPUBLISH = "unpublish"
    RESUBMIT = "resubmit"


_ALLOWED_FROM: dict[RecipeTransition, frozenset[RecipeStatusEnum]] = {
    RecipeTransition.SUBMIT: frozenset({RecipeStatusEnum.PENDING}),
    RecipeTransition.OWNER_EDIT: frozenset(RecipeStatusEnum),
    RecipeTransition.APPROVE: frozenset(RecipeStatusEnum),
    RecipeTransition.REJECT: frozenset(RecipeStatusEnum),
    RecipeTransition.UNPUBLISH: frozenset(
        {RecipeStatusEnum.APPROVED, RecipeStatusEnum.UNPUBLISHED}
    ),
    RecipeTransition.RESUBMIT: frozenset(RecipeStatusEnum),
}


def validate_rejection_reason(reason: str | None) -> str:
    """Return the trimmed reason or raise ValidationError."""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError.for_field("reason", "A rejection reason is required.")
    if len(cleaned) > MAX_REJECTION_REASON_LENGTH:
        raise ValidationError.for_field(
            "reason",
            f"The rejection reason may not exceed {MAX_REJECTION_REASON_LENGTH} "
            "characters.",
        )
    return cleaned


def can_apply(recipe: Recipe, transition: RecipeTransition) -> bool:
    """Return whether ``transition`` is legal from the recipe's current status."""
    return _current_status(recipe) in _ALLOWED_FROM[transition]


def apply_transition(
    recipe: Recipe,
    transition: RecipeTransition,
    actor: User | None = None,
    *,
    reason: str | None = None,
    now: datetime | None = None,
) -> Recipe:
    """Apply a moderation transition to ``recipe`` in place.

    Args:
        recipe: The recipe to change. It is not flushed.
        transition: What happened.
        actor: The acting user. Required for submit, owner_edit and approve.
        reason: Rejection reason, required for reject.
        now: Clock override for approval timestamps.

    Returns:
        Recipe: The same recipe.

    Raises:
        InvalidStateTransitionError: If the transition is illegal from the current
            status.
        ValidationError: If a reject has no usable reason.
    """
    current = _current_status(recipe)
    if current not in _ALLOWED_FROM[transition]:
        raise InvalidStateTransitionError("recipe", current.value, transition.value)

    match transition:
        case RecipeTransition.SUBMIT:
            submitter = _require_actor(actor, transition)
            if submitter.can_approve_recipes:
                _approve(recipe, submitter, now)
            else:
                recipe.status = RecipeStatusEnum.PENDING
                recipe.needs_reapproval = False
                _clear_approval(recipe)
        case RecipeTransition.OWNER_EDIT:
            editor = _require_actor(actor, transition)
            if current == RecipeStatusEnum.APPROVED and not editor.can_approve_recipes:
                recipe.status = RecipeStatusEnum.PENDING
                recipe.needs_reapproval = True
        case RecipeTransition.APPROVE:
            _approve(recipe, _require_actor(actor, transition), now)
        case RecipeTransition.REJECT:
            recipe.rejection_reason = validate_rejection_reason(reason)
            recipe.status = RecipeStatusEnum.REJECTED
        case RecipeTransition.UNPUBLISH:
            recipe.status = RecipeStatusEnum.UNPUBLISHED
        case RecipeTransition.RESUBMIT:
            recipe.status = RecipeStatusEnum.PENDING

    _log.debug(
        "Recipe {} {}: {} -> {}",
        recipe.id,
        transition.value,
        current.value,
        recipe.status.value,
    )
    return recipe


def _current_status(recipe: Recipe) -> RecipeStatusEnum:
    # New, unflushed recipes have no column default applied yet
    return recipe.status or RecipeStatusEnum.PENDING


def _require_actor(actor: User | None, transition: RecipeTransition) -> User:
    if actor is None:
        raise ValueError(f"Transition {transition.value} needs an acting user")
    return actor


def _approve(recipe: Recipe, actor: User, now: datetime | None) -> None:
    recipe.status = RecipeStatusEnum.APPROVED
    recipe.approved_by = actor.id
    recipe.approved_at = now or utcnow()
    recipe.needs_reapproval = False
    recipe.rejection_reason = None


def _clear_approval(recipe: Recipe) -> None:
    recipe.approved_by = None
    recipe.approved_at = None
