"""Recipe list publishing state machine.

Lists move ``draft -> review -> approved | rejected``, an approved list can be made
private and back, and a rejected or private list can be sent for review again.
The default list never leaves the private side of this graph.
"""

from enum import Enum

from sufra.core.logging import get_logger
from sufra.db.models.list_models.recipe_list import RecipeList
from sufra.enums.list_status_enum import ListStatusEnum
from sufra.exceptions.custom_exceptions import (
    InvalidStateTransitionError,
    ValidationError,
)

_log = get_logger(__name__)

MIN_RECIPES_TO_PUBLISH = 2


class ListTransition(str, Enum):
    """Publishing transitions a recipe list can go through."""

    REQUEST_PUBLISH = "request_publish"
    APPROVE = "approve"
    REJECT = "reject"
    UNPUBLISH = "unpublish"
    REPUBLISH = "republish"


_ALLOWED_FROM: dict[ListTransition, frozenset[ListStatusEnum]] = {
    ListTransition.REQUEST_PUBLISH: frozenset(
        {
            ListStatusEnum.DRAFT,
            ListStatusEnum.REVIEW,
            ListStatusEnum.REJECTED,
            ListStatusEnum.PRIVATE,
        }
    ),
    ListTransition.APPROVE: frozenset(
        {
            ListStatusEnum.REVIEW,
            ListStatusEnum.APPROVED,
            ListStatusEnum.REJECTED,
            ListStatusEnum.PRIVATE,
        }
    ),
    ListTransition.REJECT: frozenset(
        {
            ListStatusEnum.REVIEW,
            ListStatusEnum.APPROVED,
            ListStatusEnum.REJECTED,
            ListStatusEnum.PRIVATE,
        }
    ),
    ListTransition.UNPUBLISH: frozenset({ListStatusEnum.APPROVED}),
    ListTransition.REPUBLISH: frozenset({ListStatusEnum.PRIVATE}),
}

# Transitions that end with the list publicly visible
_PUBLISHING = frozenset({ListTransition.APPROVE, ListTransition.REPUBLISH})


def ensure_not_public_default(recipe_list: RecipeList, is_public: bool) -> None:
    """Reject any attempt to make the default list public."""
    if recipe_list.is_default and is_public:
        raise ValidationError.for_field(
            "is_public", "The default list cannot be made public."
        )


def apply_list_transition(
    recipe_list: RecipeList,
    transition: ListTransition,
) -> RecipeList:
    """Apply a publishing transition to ``recipe_list`` in place.

    Raises:
        InvalidStateTransitionError: If the transition is illegal from the current
            status.
        ValidationError: If the list is the default list and the transition would
            expose it, or if a publish request is made with too few recipes.
    """
    current = recipe_list.status or ListStatusEnum.DRAFT
    if current not in _ALLOWED_FROM[transition]:
        raise InvalidStateTransitionError("list", current.value, transition.value)
    if transition in _PUBLISHING or transition == ListTransition.REQUEST_PUBLISH:
        ensure_not_public_default(recipe_list, is_public=True)

    match transition:
        case ListTransition.REQUEST_PUBLISH:
            if recipe_list.recipe_count < MIN_RECIPES_TO_PUBLISH:
                raise ValidationError.for_field(
                    "recipes",
                    f"A list needs at least {MIN_RECIPES_TO_PUBLISH} recipes before "
                    "it can be published.",
                )
            recipe_list.status = ListStatusEnum.REVIEW
            recipe_list.is_public = False
        case ListTransition.APPROVE | ListTransition.REPUBLISH:
            recipe_list.status = ListStatusEnum.APPROVED
            recipe_list.is_public = True
        case ListTransition.REJECT:
            recipe_list.status = ListStatusEnum.REJECTED
            recipe_list.is_public = False
        case ListTransition.UNPUBLISH:
            recipe_list.status = ListStatusEnum.PRIVATE
            recipe_list.is_public = False

    _log.debug(
        "List {} {}: {} -> {}",
        recipe_list.id,
        transition.value,
        current.value,
        recipe_list.status.value,
    )
    return recipe_list


def is_publicly_visible(recipe_list: RecipeList) -> bool:
    """Return whether anyone, not only the owner and moderators, may see the list."""
    return (
        recipe_list.is_public
        and recipe_list.status == ListStatusEnum.APPROVED
        and not recipe_list.is_default
    )
