"""Unit tests for RecipeModerationService."""

from collections.abc import Callable

import pytest
from sqlalchemy.orm import Session

from sufra.db.models import Recipe, User
from sufra.enums.bulk_action_enums import RecipeBulkActionEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    InvalidStateTransitionError,
    ValidationError,
)
from sufra.services.recipe_moderation_service import RecipeModerationService

pytestmark = pytest.mark.unit


class TestSingleActions:
    """Unit tests for approve, reject and unpublish."""

    def test_approve_pending_recipe(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, status=RecipeStatusEnum.PENDING)

        # Act
        approved = RecipeModerationService(db_session).approve(recipe.id, moderator)

        # Assert
        assert approved.status == RecipeStatusEnum.APPROVED
        assert approved.approved_by == moderator.id

    def test_reject_requires_reason(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, status=RecipeStatusEnum.PENDING)

        # Act & Assert
        with pytest.raises(ValidationError):
            RecipeModerationService(db_session).reject(recipe.id, "  ", moderator)
        db_session.refresh(recipe)
        assert recipe.status == RecipeStatusEnum.PENDING

    def test_plain_users_cannot_moderate(
        self,
        db_session: Session,
        user: User,
        other_user: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, status=RecipeStatusEnum.PENDING)

        # Act & Assert
        with pytest.raises(AuthorizationError):
            RecipeModerationService(db_session).approve(recipe.id, other_user)

    def test_pending_queue_includes_reapproval(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        make_recipe(user, name="Shish barak", status=RecipeStatusEnum.PENDING)
        make_recipe(
            user,
            name="Muhammara",
            status=RecipeStatusEnum.REJECTED,
            needs_reapproval=True,
        )
        make_recipe(user, name="Fattoush")

        # Act
        queue = RecipeModerationService(db_session).pending_queue(moderator)

        # Assert
        assert [item["name"] for item in queue] == ["Shish barak", "Muhammara"]


class TestBulk:
    """Unit tests for bulk moderation."""

    def test_publish_many(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        ids = [
            make_recipe(user, name=name, status=RecipeStatusEnum.PENDING).id
            for name in ("Kibbeh", "Yalanji")
        ]

        # Act
        result = RecipeModerationService(db_session).bulk(
            ids, RecipeBulkActionEnum.PUBLISH, moderator
        )

        # Assert
        assert result["count"] == 2
        statuses = {db_session.get(Recipe, i).status for i in ids}
        assert statuses == {RecipeStatusEnum.APPROVED}

    def test_batch_is_all_or_nothing(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        published = make_recipe(user, name="Kibbeh")
        pending = make_recipe(user, name="Yalanji", status=RecipeStatusEnum.PENDING)

        # Act & Assert
        with pytest.raises(InvalidStateTransitionError):
            RecipeModerationService(db_session).bulk(
                [published.id, pending.id], RecipeBulkActionEnum.UNPUBLISH, moderator
            )
        assert db_session.get(Recipe, published.id).status == RecipeStatusEnum.APPROVED
        assert db_session.get(Recipe, pending.id).status == RecipeStatusEnum.PENDING

    def test_unknown_ids_are_reported(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, status=RecipeStatusEnum.PENDING)

        # Act & Assert
        with pytest.raises(ValidationError, match="Unknown recipe ids: 999"):
            RecipeModerationService(db_session).bulk(
                [recipe.id, 999], RecipeBulkActionEnum.PUBLISH, moderator
            )

    def test_change_status_to_rejected_needs_reason(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, status=RecipeStatusEnum.PENDING)
        service = RecipeModerationService(db_session)

        # Act
        with pytest.raises(ValidationError):
            service.bulk(
                [recipe.id],
                RecipeBulkActionEnum.CHANGE_STATUS,
                moderator,
                status=RecipeStatusEnum.REJECTED,
            )
        service.bulk(
            [recipe.id],
            RecipeBulkActionEnum.CHANGE_STATUS,
            moderator,
            status=RecipeStatusEnum.REJECTED,
            reason="Too few steps",
        )

        # Assert
        db_session.refresh(recipe)
        assert recipe.status == RecipeStatusEnum.REJECTED
        assert recipe.rejection_reason == "Too few steps"

    def test_bulk_delete_is_admin_only(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        admin: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(user)
        recipe_id = recipe.id
        service = RecipeModerationService(db_session)

        # Act
        with pytest.raises(AuthorizationError):
            service.bulk([recipe_id], RecipeBulkActionEnum.DELETE, moderator)
        result = service.bulk([recipe_id], RecipeBulkActionEnum.DELETE, admin)

        # Assert
        assert result == {"message": "Deleted 1 recipes.", "count": 1}
        assert db_session.get(Recipe, recipe_id) is None


class TestDashboard:
    """Unit tests for the back office counters."""

    def test_counts_by_status(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        make_recipe(user, name="Kibbeh")
        make_recipe(user, name="Yalanji", status=RecipeStatusEnum.PENDING)
        make_recipe(
            user,
            name="Mujaddara",
            status=RecipeStatusEnum.PENDING,
            needs_reapproval=True,
        )

        # Act
        stats = RecipeModerationService(db_session).dashboard_stats(moderator)

        # Assert
        assert stats["recipes"]["total"] == 3
        assert stats["recipes"]["approved"] == 1
        assert stats["recipes"]["pending"] == 2
        assert stats["recipes"]["needs_reapproval"] == 1
        assert stats["users"] == 2
