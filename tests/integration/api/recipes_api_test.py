"""Integration tests for the recipe routes."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from sufra.db.models import Recipe, User

pytestmark = pytest.mark.integration


class TestSubmissionLifecycle:
    """A plain user's submission stays private until a moderator approves it."""

    def test_submit_review_and_publish(
        self,
        client: TestClient,
        user: User,
        moderator: User,
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Act: submit
        created = client.post(
            "/api/v1/recipes",
            json={
                "name": "Kibbeh",
                "servings": 4,
                "ingredients": [
                    {"name": "برغل", "amount": "2", "unit": "كوب"},
                    {"name": "لحمة مفرومة", "amount": "500", "unit": "غرام"},
                ],
                "steps": ["Soak the bulgur", "Knead with the meat"],
                "difficulty": "متوسطة",
            },
            headers=headers_for(user),
        )

        # Assert
        assert created.status_code == 201
        body = created.json()
        assert body["status"] == "pending"
        assert body["servings"] == "4"
        assert body["difficulty"] == "متوسطة"
        assert [i["name"] for i in body["ingredients"]] == ["برغل", "لحمة مفرومة"]
        slug = body["slug"]

        assert client.get(f"/api/v1/recipes/{slug}").status_code == 404
        owner_view = client.get(f"/api/v1/recipes/{slug}", headers=headers_for(user))
        assert owner_view.status_code == 200

        # Act: approve
        approved = client.post(
            f"/api/v1/admin/recipes/{body['id']}/approve",
            headers=headers_for(moderator),
        )

        # Assert
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"
        assert approved.json()["approved_by"] == moderator.id
        public = client.get(f"/api/v1/recipes/{slug}")
        assert public.status_code == 200
        listing = client.get("/api/v1/recipes", params={"search": "Kibbeh"}).json()
        assert slug in [card["slug"] for card in listing["data"]]

    def test_submitting_requires_identity(self, client: TestClient) -> None:
        # Act
        response = client.post("/api/v1/recipes", json={"name": "Kibbeh"})

        # Assert
        assert response.status_code == 401

    def test_unknown_identity_is_rejected(self, client: TestClient) -> None:
        # Act
        response = client.get("/api/v1/recipes/mine", headers={"X-User-ID": "9999"})

        # Assert
        assert response.status_code == 401

    def test_missing_name_is_a_validation_error(
        self,
        client: TestClient,
        user: User,
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Act
        response = client.post(
            "/api/v1/recipes", json={"servings": "4"}, headers=headers_for(user)
        )

        # Assert
        assert response.status_code == 422


class TestOwnerActions:
    """Integration tests for edits and history."""

    def test_edit_of_approved_recipe_needs_reapproval(
        self,
        client: TestClient,
        user: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe = make_recipe(user, name="Fattoush")

        # Act
        response = client.patch(
            f"/api/v1/recipes/{recipe.id}",
            json={"servings": "6"},
            headers=headers_for(user),
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert response.json()["needs_reapproval"] is True
        assert response.json()["name"] == "Fattoush"

    def test_other_users_cannot_edit(
        self,
        client: TestClient,
        user: User,
        other_user: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe = make_recipe(user)

        # Act
        response = client.patch(
            f"/api/v1/recipes/{recipe.id}",
            json={"servings": "6"},
            headers=headers_for(other_user),
        )

        # Assert
        assert response.status_code == 403
        assert response.json() == {"detail": "This action is unauthorized."}

    def test_delete_is_admin_only(
        self,
        client: TestClient,
        user: User,
        admin: User,
        make_recipe: Callable[..., Recipe],
        headers_for: Callable[[User], dict[str, str]],
    ) -> None:
        # Arrange
        recipe = make_recipe(user)

        # Act
        refused = client.delete(
            f"/api/v1/recipes/{recipe.id}", headers=headers_for(user)
        )
        deleted = client.delete(
            f"/api/v1/recipes/{recipe.id}", headers=headers_for(admin)
        )

        # Assert
        assert refused.status_code == 403
        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Recipe deleted."
