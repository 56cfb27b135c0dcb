"""Unit tests for ListService."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.list_request import (
    ListCreateRequest,
    ListUpdateRequest,
)
from sufra.core.config.config import settings
from sufra.db.models import Recipe, RecipeList, User
from sufra.enums.bulk_action_enums import ListBulkActionEnum
from sufra.enums.list_status_enum import ListStatusEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from sufra.services.list_service import (
    DEFAULT_LIST_NAME,
    DEFAULT_LIST_SLUG,
    ListService,
    list_view,
)
from sufra.services.list_state_machine import ListTransition

pytestmark = pytest.mark.unit


class TestDefaultList:
    """Unit tests for the favorites list."""

    def test_created_lazily_as_private(self, db_session: Session, user: User) -> None:
        # Act
        first = ListService(db_session).default_list(user)
        db_session.commit()
        second = ListService(db_session).default_list(user)

        # Assert
        assert first.id == second.id
        assert first.name == DEFAULT_LIST_NAME
        assert first.is_default is True
        assert first.is_public is False
        assert first.status == ListStatusEnum.PRIVATE

    def test_index_puts_default_list_first(
        self, db_session: Session, user: User, make_list: Callable[..., RecipeList]
    ) -> None:
        # Arrange
        make_list(user, name="Ramadan")

        # Act
        lists = ListService(db_session).index(user)

        # Assert
        assert [item["is_default"] for item in lists] == [True, False]

    def test_favorites_toggle_adds_then_removes(
        self,
        db_session: Session,
        user: User,
        other_user: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(other_user)
        service = ListService(db_session)

        # Act
        added = service.favorites_toggle(recipe.id, user)
        removed = service.favorites_toggle(recipe.id, user)

        # Assert
        assert added is True
        assert removed is False
        assert service.default_list(user).recipe_count == 0

    def test_hidden_recipes_cannot_be_favorited(
        self,
        db_session: Session,
        user: User,
        other_user: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(other_user, status=RecipeStatusEnum.PENDING)

        # Act & Assert
        with pytest.raises(NotFoundError):
            ListService(db_session).favorites_toggle(recipe.id, user)

    def test_default_list_cannot_be_deleted_or_made_public(
        self, db_session: Session, user: User
    ) -> None:
        # Arrange
        service = ListService(db_session)
        favorites = service.default_list(user)
        db_session.commit()

        # Act & Assert
        with pytest.raises(ValidationError):
            service.destroy(favorites.id, user)
        with pytest.raises(ValidationError):
            service.update(favorites.id, ListUpdateRequest(is_public=True), user)
        with pytest.raises(ValidationError):
            service.request_publish(favorites.id, user)

    def test_user_list_named_favorites_leaves_room_for_default_list(
        self,
        db_session: Session,
        user: User,
        other_user: User,
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        recipe = make_recipe(other_user)
        service = ListService(db_session)
        own = service.create(ListCreateRequest(name="Favorites"), user)

        # Act
        added = service.favorites_toggle(recipe.id, user)
        lists = service.index(user)

        # Assert
        assert added is True
        assert own.slug != DEFAULT_LIST_SLUG
        assert own.slug.startswith("favorites-")
        assert [item["is_default"] for item in lists] == [True, False]
        assert lists[0]["slug"] == DEFAULT_LIST_SLUG

    def test_default_list_avoids_a_slug_already_in_use(
        self, db_session: Session, user: User, make_list: Callable[..., RecipeList]
    ) -> None:
        # Arrange
        older = make_list(user, name="Favorites")
        older.slug = DEFAULT_LIST_SLUG
        db_session.commit()

        # Act
        favorites = ListService(db_session).default_list(user)
        db_session.commit()

        # Assert
        assert favorites.id != older.id
        assert favorites.is_default is True
        assert favorites.slug.startswith(f"{DEFAULT_LIST_SLUG}-")

    def test_default_list_created_concurrently_is_reused(
        self,
        db_session: Session,
        user: User,
        stale_lookup: Callable[[], Any],
    ) -> None:
        # Arrange
        service = ListService(db_session)
        winner = service.default_list(user)
        db_session.commit()
        pending = RecipeList(
            user_id=user.id, name="Ramadan", slug="ramadan", is_default=False
        )
        db_session.add(pending)

        # Act
        with stale_lookup():
            favorites = service.default_list(user)
        db_session.commit()

        # Assert
        assert favorites.id == winner.id
        defaults = db_session.query(RecipeList).filter_by(
            user_id=user.id, is_default=True
        )
        assert defaults.count() == 1
        assert db_session.query(RecipeList).filter_by(slug="ramadan").count() == 1


class TestOwnerOperations:
    """Unit tests for list editing by its owner."""

    def test_create_starts_as_draft(self, db_session: Session, user: User) -> None:
        # Act
        recipe_list = ListService(db_session).create(
            ListCreateRequest(name="Mezze night"), user
        )

        # Assert
        assert recipe_list.status == ListStatusEnum.DRAFT
        assert recipe_list.is_public is False
        assert recipe_list.slug == "mezze-night"

    def test_same_name_gets_a_distinct_slug(
        self, db_session: Session, user: User
    ) -> None:
        # Arrange
        service = ListService(db_session)

        # Act
        first = service.create(ListCreateRequest(name="Mezze"), user)
        second = service.create(ListCreateRequest(name="Mezze"), user)

        # Assert
        assert first.slug == "mezze"
        assert second.slug != first.slug
        assert second.slug.startswith("mezze-")

    def test_add_recipe_is_idempotent(
        self,
        db_session: Session,
        user: User,
        make_recipe: Callable[..., Recipe],
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipe_list = make_list(user)
        recipe = make_recipe(user)
        service = ListService(db_session)

        # Act
        service.add_recipe(recipe_list.id, recipe.id, user)
        service.add_recipe(recipe_list.id, recipe.id, user)

        # Assert
        assert recipe_list.recipe_count == 1

    def test_lists_of_other_users_look_missing(
        self,
        db_session: Session,
        user: User,
        other_user: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipe_list = make_list(other_user)

        # Act & Assert
        with pytest.raises(NotFoundError):
            ListService(db_session).update(
                recipe_list.id, ListUpdateRequest(name="Mine"), user
            )

    def test_request_publish_needs_enough_recipes(
        self,
        db_session: Session,
        user: User,
        make_recipe: Callable[..., Recipe],
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        lonely = make_list(user, name="Lonely", recipes=[make_recipe(user)])
        full = make_list(
            user,
            name="Full",
            recipes=[
                make_recipe(user, name="Kibbeh"),
                make_recipe(user, name="Fatteh"),
            ],
        )
        service = ListService(db_session)

        # Act & Assert
        with pytest.raises(ValidationError):
            service.request_publish(lonely.id, user)
        assert service.request_publish(full.id, user).status == ListStatusEnum.REVIEW

    def test_owner_can_hide_and_republish_approved_list(
        self,
        db_session: Session,
        user: User,
        make_recipe: Callable[..., Recipe],
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipes = [make_recipe(user, name="Kibbeh"), make_recipe(user, name="Fatteh")]
        recipe_list = make_list(user, recipes=recipes, status=ListStatusEnum.APPROVED)
        service = ListService(db_session)

        # Act
        hidden = service.update(
            recipe_list.id, ListUpdateRequest(is_public=False), user
        )
        hidden_status = hidden.status
        shown = service.update(recipe_list.id, ListUpdateRequest(is_public=True), user)

        # Assert
        assert hidden_status == ListStatusEnum.PRIVATE
        assert shown.status == ListStatusEnum.APPROVED
        assert shown.is_public is True

    def test_draft_cannot_be_made_public_directly(
        self, db_session: Session, user: User, make_list: Callable[..., RecipeList]
    ) -> None:
        # Arrange
        recipe_list = make_list(user)

        # Act & Assert
        with pytest.raises(ValidationError):
            ListService(db_session).update(
                recipe_list.id, ListUpdateRequest(is_public=True), user
            )

    def test_failed_update_keeps_the_previous_cover(
        self,
        db_session: Session,
        user: User,
        make_list: Callable[..., RecipeList],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        # Arrange
        monkeypatch.setattr(settings, "MEDIA_ROOT", str(tmp_path))
        old_cover = tmp_path / "old.jpg"
        old_cover.write_bytes(b"jpeg")
        recipe_list = make_list(user, cover_image="old.jpg")

        # Act
        with pytest.raises(ValidationError):
            ListService(db_session).update(
                recipe_list.id,
                ListUpdateRequest(cover_image="new.jpg", request_publish=True),
                user,
            )

        # Assert
        assert old_cover.exists()

    def test_replaced_cover_is_deleted_once_saved(
        self,
        db_session: Session,
        user: User,
        make_list: Callable[..., RecipeList],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        # Arrange
        monkeypatch.setattr(settings, "MEDIA_ROOT", str(tmp_path))
        old_cover = tmp_path / "old.jpg"
        old_cover.write_bytes(b"jpeg")
        recipe_list = make_list(user, cover_image="old.jpg")

        # Act
        updated = ListService(db_session).update(
            recipe_list.id, ListUpdateRequest(cover_image="new.jpg"), user
        )

        # Assert
        assert updated.cover_image == "new.jpg"
        assert not old_cover.exists()


class TestVisibility:
    """Unit tests for who may view a list."""

    def test_draft_is_hidden_from_others(
        self,
        db_session: Session,
        user: User,
        other_user: User,
        moderator: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipe_list = make_list(user)
        service = ListService(db_session)

        # Act & Assert
        for actor in (None, other_user):
            with pytest.raises(NotFoundError):
                service.show(recipe_list.id, actor)
        assert service.show(recipe_list.id, user)["id"] == recipe_list.id
        assert service.show(recipe_list.id, moderator)["id"] == recipe_list.id

    def test_detail_only_shows_approved_recipes(
        self,
        db_session: Session,
        user: User,
        make_recipe: Callable[..., Recipe],
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipes = [
            make_recipe(user, name="Kibbeh"),
            make_recipe(user, name="Yalanji", status=RecipeStatusEnum.PENDING),
        ]
        recipe_list = make_list(user, recipes=recipes, status=ListStatusEnum.APPROVED)

        # Act
        view = list_view(recipe_list, with_recipes=True)

        # Assert
        assert view["recipes_count"] == 2
        assert [card["name"] for card in view["recipes"]] == ["Kibbeh"]

    def test_public_index_lists_only_approved_public_lists(
        self, db_session: Session, user: User, make_list: Callable[..., RecipeList]
    ) -> None:
        # Arrange
        make_list(user, name="Published", status=ListStatusEnum.APPROVED)
        make_list(user, name="In review", status=ListStatusEnum.REVIEW)
        make_list(user, name="Hidden", status=ListStatusEnum.PRIVATE)

        # Act
        lists = ListService(db_session).public_index()

        # Assert
        assert [item["name"] for item in lists] == ["Published"]


class TestModeration:
    """Unit tests for list moderation."""

    def test_moderator_approves_list_in_review(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipe_list = make_list(user, status=ListStatusEnum.REVIEW)

        # Act
        approved = ListService(db_session).moderate(
            recipe_list.id, ListTransition.APPROVE, moderator
        )

        # Assert
        assert approved.status == ListStatusEnum.APPROVED
        assert approved.is_public is True

    def test_plain_user_cannot_moderate(
        self,
        db_session: Session,
        user: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        recipe_list = make_list(user, status=ListStatusEnum.REVIEW)

        # Act & Assert
        with pytest.raises(AuthorizationError):
            ListService(db_session).moderate(
                recipe_list.id, ListTransition.APPROVE, user
            )

    def test_bulk_is_all_or_nothing(
        self,
        db_session: Session,
        user: User,
        moderator: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        in_review = make_list(user, name="A", status=ListStatusEnum.REVIEW)
        draft = make_list(user, name="B", status=ListStatusEnum.DRAFT)

        # Act & Assert
        with pytest.raises(InvalidStateTransitionError):
            ListService(db_session).bulk(
                [in_review.id, draft.id], ListBulkActionEnum.APPROVE, moderator
            )
        assert db_session.get(RecipeList, in_review.id).status == ListStatusEnum.REVIEW

    def test_bulk_delete_refuses_default_lists(
        self,
        db_session: Session,
        user: User,
        admin: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        service = ListService(db_session)
        favorites = service.default_list(user)
        ordinary = make_list(user)

        # Act & Assert
        with pytest.raises(ValidationError):
            service.bulk([favorites.id, ordinary.id], ListBulkActionEnum.DELETE, admin)
        assert db_session.get(RecipeList, ordinary.id) is not None

    def test_bulk_delete(
        self,
        db_session: Session,
        user: User,
        admin: User,
        make_list: Callable[..., RecipeList],
    ) -> None:
        # Arrange
        ids = [make_list(user, name=name).id for name in ("A", "B")]

        # Act
        result = ListService(db_session).bulk(ids, ListBulkActionEnum.DELETE, admin)

        # Assert
        assert result["count"] == 2
        assert db_session.query(RecipeList).count() == 0
