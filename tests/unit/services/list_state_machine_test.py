"""Unit tests for the recipe list publishing state machine."""

import pytest

from sufra.db.models import ListItem, RecipeList
from sufra.enums.list_status_enum import ListStatusEnum
from sufra.exceptions.custom_exceptions import (
    InvalidStateTransitionError,
    ValidationError,
)
from sufra.services.list_state_machine import (
    MIN_RECIPES_TO_PUBLISH,
    ListTransition,
    apply_list_transition,
    ensure_not_public_default,
    is_publicly_visible,
)

pytestmark = pytest.mark.unit


def _list(
    status: ListStatusEnum = ListStatusEnum.DRAFT,
    recipes: int = 0,
    *,
    is_default: bool = False,
    is_public: bool = False,
) -> RecipeList:
    recipe_list = RecipeList(
        id=7,
        user_id=1,
        name="Mezze",
        slug="mezze",
        status=status,
        is_default=is_default,
        is_public=is_public,
    )
    recipe_list.items = [
        ListItem(recipe_id=recipe_id, position=recipe_id)
        for recipe_id in range(recipes)
    ]
    return recipe_list


class TestRequestPublish:
    """Unit tests for request_publish."""

    @pytest.mark.parametrize("recipes", [0, MIN_RECIPES_TO_PUBLISH - 1])
    def test_rejects_lists_with_too_few_recipes(self, recipes: int) -> None:
        # Arrange
        recipe_list = _list(recipes=recipes)

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            apply_list_transition(recipe_list, ListTransition.REQUEST_PUBLISH)
        assert "recipes" in exc_info.value.get_errors()
        assert recipe_list.status == ListStatusEnum.DRAFT

    @pytest.mark.parametrize(
        "status",
        [
            ListStatusEnum.DRAFT,
            ListStatusEnum.REJECTED,
            ListStatusEnum.PRIVATE,
        ],
    )
    def test_moves_list_into_review(self, status: ListStatusEnum) -> None:
        # Arrange
        recipe_list = _list(status, recipes=MIN_RECIPES_TO_PUBLISH)

        # Act
        apply_list_transition(recipe_list, ListTransition.REQUEST_PUBLISH)

        # Assert
        assert recipe_list.status == ListStatusEnum.REVIEW
        assert recipe_list.is_public is False

    def test_default_list_can_never_be_sent_for_review(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.PRIVATE, recipes=5, is_default=True)

        # Act & Assert
        with pytest.raises(ValidationError):
            apply_list_transition(recipe_list, ListTransition.REQUEST_PUBLISH)
        assert recipe_list.status == ListStatusEnum.PRIVATE

    def test_approved_list_cannot_request_publish(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.APPROVED, recipes=3, is_public=True)

        # Act & Assert
        with pytest.raises(InvalidStateTransitionError):
            apply_list_transition(recipe_list, ListTransition.REQUEST_PUBLISH)


class TestModeration:
    """Unit tests for approve, reject, unpublish and republish."""

    def test_approve_makes_list_public(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.REVIEW, recipes=2)

        # Act
        apply_list_transition(recipe_list, ListTransition.APPROVE)

        # Assert
        assert recipe_list.status == ListStatusEnum.APPROVED
        assert recipe_list.is_public is True
        assert is_publicly_visible(recipe_list)

    def test_reject_hides_list(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.APPROVED, recipes=2, is_public=True)

        # Act
        apply_list_transition(recipe_list, ListTransition.REJECT)

        # Assert
        assert recipe_list.status == ListStatusEnum.REJECTED
        assert recipe_list.is_public is False
        assert not is_publicly_visible(recipe_list)

    def test_unpublish_and_republish_round_trip(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.APPROVED, recipes=2, is_public=True)

        # Act
        apply_list_transition(recipe_list, ListTransition.UNPUBLISH)
        private_status = recipe_list.status
        apply_list_transition(recipe_list, ListTransition.REPUBLISH)

        # Assert
        assert private_status == ListStatusEnum.PRIVATE
        assert recipe_list.status == ListStatusEnum.APPROVED
        assert recipe_list.is_public is True

    def test_draft_cannot_be_approved_directly(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.DRAFT, recipes=2)

        # Act & Assert
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            apply_list_transition(recipe_list, ListTransition.APPROVE)
        assert exc_info.value.entity == "list"

    def test_default_list_cannot_be_approved(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.PRIVATE, recipes=2, is_default=True)

        # Act & Assert
        with pytest.raises(ValidationError):
            apply_list_transition(recipe_list, ListTransition.APPROVE)
        assert recipe_list.is_public is False

    def test_only_approved_lists_can_be_unpublished(self) -> None:
        with pytest.raises(InvalidStateTransitionError):
            apply_list_transition(
                _list(ListStatusEnum.REVIEW), ListTransition.UNPUBLISH
            )


class TestEnsureNotPublicDefault:
    """Unit tests for the default list guard."""

    def test_allows_private_default_list(self) -> None:
        ensure_not_public_default(_list(is_default=True), is_public=False)

    def test_allows_public_ordinary_list(self) -> None:
        ensure_not_public_default(_list(), is_public=True)

    def test_rejects_public_default_list(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ensure_not_public_default(_list(is_default=True), is_public=True)
        assert "is_public" in exc_info.value.get_errors()

    def test_default_list_is_never_publicly_visible(self) -> None:
        # Arrange
        recipe_list = _list(ListStatusEnum.APPROVED, is_default=True, is_public=True)

        # Act & Assert
        assert is_publicly_visible(recipe_list) is False
