"""Integration tests for the back office routes."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from sufra.db.models import City, Recipe, User
from sufra.enums.recipe_status_enum import RecipeStatusEnum

pytestmark = pytest.mark.integration


class TestAccess:
    """Integration tests for role checks on the back office."""

    @pytest.mark.parametrize(
        "path", ["/api/v1/admin/dashboard", "/api/v1/admin/recipes/pending"]
    )
    def test_plain_users_are_refused(
        self,
        client: TestClient,
        user: User,
        headers_for: Callable[[User], dict[str, str]],
        path: str,
    ) -> None:
        assert client.get(path, headers=headers_for(user)).status_code == 403

    def test_settings_are_admin_only(
        self,
        client: TestClient,
        moderator: User,
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        response = client.get("/api/v1/admin/settings", headers=headers_for(moderator))
        assert response.status_code == 403


class TestDashboard:
    """Integration tests for the back office counters."""

    def test_counts(
        self,
        client: TestClient,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        make_recipe(user, name="Mansaf")
        make_recipe(user, name="Maqluba", status=RecipeStatusEnum.PENDING)

        # Act
        response = client.get(
            "/api/v1/admin/dashboard", headers=headers_for(moderator)
        )

        # Assert
        assert response.status_code == 200
        recipes = response.json()["recipes"]
        assert recipes["total"] == 2
        assert recipes["approved"] == 1
        assert recipes["pending"] == 1


class TestBulkRecipes:
    """Integration tests for bulk recipe moderation."""

    def test_bulk_publish(
        self,
        client: TestClient,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        ids = [
            make_recipe(user, name=n, status=RecipeStatusEnum.PENDING).id
            for n in ("Mansaf", "Maqluba")
        ]

        # Act
        response = client.post(
            "/api/v1/admin/recipes/bulk",
            json={"ids": ids, "action": "publish"},
            headers=headers_for(moderator),
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["count"] == 2
        pending = client.get(
            "/api/v1/admin/recipes/pending", headers=headers_for(moderator)
        )
        assert pending.json() == []

    def test_reject_without_reason_is_refused(
        self,
        client: TestClient,
        user: User,
        moderator: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, status=RecipeStatusEnum.PENDING)

        # Act
        response = client.post(
            "/api/v1/admin/recipes/bulk",
            json={"ids": [recipe.id], "action": "change_status", "status": "rejected"},
            headers=headers_for(moderator),
        )

        # Assert
        assert response.status_code == 422
        assert "reason" in response.json()["errors"]

    def test_unknown_action_is_rejected(
        self,
        client: TestClient,
        moderator: User,
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        response = client.post(
            "/api/v1/admin/recipes/bulk",
            json={"ids": [1], "action": "archive"},
            headers=headers_for(moderator),
        )
        assert response.status_code == 422


class TestCities:
    """Integration tests for city management."""

    def test_create_and_delete(
        self,
        client: TestClient,
        admin: User,
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Act
        created = client.post(
            "/api/v1/admin/cities",
            json={"name": "Irbid"},
            headers=headers_for(admin),
        )
        deleted = client.delete(
            f"/api/v1/admin/cities/{created.json()['id']}",
            headers=headers_for(admin),
        )

        # Assert
        assert created.status_code == 201
        assert created.json()["slug"] == "irbid"
        assert deleted.status_code == 200
        assert deleted.json()["count"] == 0

    def test_delete_with_recipes_needs_default_city(
        self,
        client: TestClient,
        user: User,
        admin: User,
        make_city: Callable[..., City],
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        city = make_city("Salt")
        make_recipe(user, city_id=city.id)

        # Act
        response = client.delete(
            f"/api/v1/admin/cities/{city.id}", headers=headers_for(admin)
        )

        # Assert
        assert response.status_code == 409


class TestSettings:
    """Integration tests for platform settings."""

    def test_api_key_is_masked(
        self,
        client: TestClient,
        admin: User,
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Act
        updated = client.patch(
            "/api/v1/admin/settings",
            json={"gemini_api_key": "AIza-secret-1234", "gemini_model": "gemini-pro"},
            headers=headers_for(admin),
        )
        shown = client.get("/api/v1/admin/settings", headers=headers_for(admin))

        # Assert
        assert updated.status_code == 200
        assert shown.json()["gemini_api_key"] == "...1234"
        assert shown.json()["gemini_model"] == "gemini-pro"
        assert shown.json()["has_ai_credentials"] is True
        assert "secret" not in shown.text
