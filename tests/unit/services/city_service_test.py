"""Unit tests for CityService."""

from collections.abc import Callable

import pytest
from sqlalchemy.orm import Session

from sufra.db.models import City, Recipe, User
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.exceptions.custom_exceptions import ConflictError, ValidationError
from sufra.services.city_service import CityService
from sufra.services.settings_service import SettingsService

pytestmark = pytest.mark.unit


class TestCityCrud:
    """Unit tests for creating, renaming and listing cities."""

    def test_create_generates_slug(self, db_session: Session) -> None:
        # Act
        city = CityService(db_session).create("  Tripoli ", description="North")

        # Assert
        assert city.name == "Tripoli"
        assert city.slug == "tripoli"

    def test_duplicate_name_is_rejected(
        self, db_session: Session, make_city: Callable[..., City]
    ) -> None:
        # Arrange
        make_city("Tripoli")

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            CityService(db_session).create("Tripoli")
        assert "name" in exc_info.value.get_errors()

    def test_rename_regenerates_slug(self, db_session: Session) -> None:
        # Arrange
        service = CityService(db_session)
        city = service.create("Saida")

        # Act
        renamed = service.update(city.id, {"name": "Sidon"})

        # Assert
        assert renamed.slug == "sidon"

    def test_list_counts_approved_recipes_only(
        self,
        db_session: Session,
        user: User,
        make_city: Callable[..., City],
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        city = make_city("Homs")
        make_recipe(user, name="Halawet el jibn", city_id=city.id)
        make_recipe(
            user, name="Kibbeh", city_id=city.id, status=RecipeStatusEnum.PENDING
        )

        # Act
        public = CityService(db_session).list_cities()
        admin = CityService(db_session).list_cities(approved_only=False)

        # Assert
        assert public[0]["recipes_count"] == 1
        assert admin[0]["recipes_count"] == 2


class TestDeleteMany:
    """Unit tests for deleting cities."""

    def test_city_without_recipes_needs_no_default(
        self, db_session: Session, make_city: Callable[..., City]
    ) -> None:
        # Arrange
        city = make_city("Zahle")

        # Act
        moved = CityService(db_session).delete(city.id)

        # Assert
        assert moved == 0
        assert db_session.query(City).count() == 0

    def test_refuses_when_recipes_need_a_default_city(
        self,
        db_session: Session,
        user: User,
        make_city: Callable[..., City],
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        city = make_city("Zahle")
        recipe = make_recipe(user, city_id=city.id)

        # Act & Assert
        with pytest.raises(ConflictError):
            CityService(db_session).delete(city.id)
        assert db_session.get(City, city.id) is not None
        assert db_session.get(Recipe, recipe.id).city_id == city.id

    def test_moves_recipes_to_default_city(
        self,
        db_session: Session,
        user: User,
        make_city: Callable[..., City],
        make_recipe: Callable[..., Recipe],
    ) -> None:
        # Arrange
        default = make_city("Beirut")
        doomed = [make_city("Zahle"), make_city("Jbeil")]
        recipes = [make_recipe(user, name=c.name, city_id=c.id) for c in doomed]
        SettingsService(db_session).update({"default_city_id": default.id})

        # Act
        moved = CityService(db_session).delete_many([city.id for city in doomed])

        # Assert
        assert moved == 2
        for recipe in recipes:
            assert db_session.get(Recipe, recipe.id).city_id == default.id
        assert [city.name for city in db_session.query(City).all()] == ["Beirut"]

    def test_default_city_itself_cannot_be_deleted(
        self, db_session: Session, make_city: Callable[..., City]
    ) -> None:
        # Arrange
        default = make_city("Beirut")
        SettingsService(db_session).update({"default_city_id": default.id})

        # Act & Assert
        with pytest.raises(ConflictError, match="default city cannot be deleted"):
            CityService(db_session).delete(default.id)

    def test_unknown_ids_are_rejected(self, db_session: Session) -> None:
        with pytest.raises(ValidationError):
            CityService(db_session).delete_many([41, 42])
