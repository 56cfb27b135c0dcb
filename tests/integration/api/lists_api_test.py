"""Integration tests for the recipe list routes."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from sufra.db.models import Recipe, RecipeList, User

pytestmark = pytest.mark.integration


class TestFavorites:
    """Integration tests for the favorites toggle."""

    def test_toggle_twice(
        self,
        client: TestClient,
        user: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe = make_recipe(user)
        url = f"/api/v1/lists/favorites/{recipe.id}"

        # Act
        first = client.post(url, headers=headers_for(user))
        second = client.post(url, headers=headers_for(user))

        # Assert
        assert first.status_code == 200
        assert first.json()["in_list"] is True
        assert second.json()["in_list"] is False
        assert first.json()["list_id"] == second.json()["list_id"]


class TestPublishing:
    """A list reaches the public index only after review."""

    def test_request_review_and_approve(
        self,
        client: TestClient,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipes = [make_recipe(user, name=n) for n in ("Fattoush", "Tabbouleh")]
        created = client.post(
            "/api/v1/lists",
            json={"name": "Summer salads"},
            headers=headers_for(user),
        )
        list_id = created.json()["id"]
        for recipe in recipes:
            client.post(
                f"/api/v1/lists/{list_id}/recipes",
                json={"recipe_id": recipe.id},
                headers=headers_for(user),
            )

        # Act
        review = client.post(
            f"/api/v1/lists/{list_id}/request-publish", headers=headers_for(user)
        )
        approved = client.post(
            f"/api/v1/admin/lists/{list_id}/approve", headers=headers_for(moderator)
        )

        # Assert
        assert created.status_code == 201
        assert created.json()["status"] == "draft"
        assert review.json()["status"] == "review"
        assert approved.json()["status"] == "approved"
        public = client.get("/api/v1/lists/public").json()
        assert [row["id"] for row in public] == [list_id]
        detail = client.get(f"/api/v1/lists/{list_id}").json()
        assert [card["name"] for card in detail["recipes"]] == [
            "Fattoush",
            "Tabbouleh",
        ]

    def test_review_needs_enough_recipes(
        self,
        client: TestClient,
        user: User,
        make_list: Callable[..., RecipeList],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe_list = make_list(user, "Empty")

        # Act
        response = client.post(
            f"/api/v1/lists/{recipe_list.id}/request-publish",
            headers=headers_for(user),
        )

        # Assert
        assert response.status_code == 422

    def test_approving_a_draft_is_a_conflict(
        self,
        client: TestClient,
        user: User,
        moderator: User,
        make_list: Callable[..., RecipeList],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe_list = make_list(user, "Drafty")

        # Act
        response = client.post(
            f"/api/v1/admin/lists/{recipe_list.id}/approve",
            headers=headers_for(moderator),
        )

        # Assert
        assert response.status_code == 409
        assert response.json()["from_state"] == "draft"

    def test_private_lists_look_missing_to_others(
        self,
        client: TestClient,
        user: User,
        other_user: User,
        make_list: Callable[..., RecipeList],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe_list = make_list(user, "Secret family dishes")

        # Act & Assert
        url = f"/api/v1/lists/{recipe_list.id}"
        assert client.get(url).status_code == 404
        assert client.get(url, headers=headers_for(other_user)).status_code == 404
        assert client.get(url, headers=headers_for(user)).status_code == 200
