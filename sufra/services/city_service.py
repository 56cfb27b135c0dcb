"""City management.

A city that recipes point at can only be deleted by first moving those recipes to
the configured default city.
"""

from typing import Any

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.taxonomy_models.city import City
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.exceptions.custom_exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from sufra.services.settings_service import SettingsService
from sufra.utils.media_storage import delete_media, media_url
from sufra.utils.slugify import slugify, unique_slug

_log = get_logger(__name__)


def city_view(city: City, recipes_count: int | None = None) -> dict[str, Any]:
    view: dict[str, Any] = {
        "id": city.id,
        "name": city.name,
        "slug": city.slug,
        "description": city.description,
        "image_url": media_url(city.image_path),
    }
    if recipes_count is not None:
        view["recipes_count"] = recipes_count
    return view


class CityService:
    """CRUD for cities and the default-city reassignment on delete."""

    def __init__(
        self, db: Session, settings_service: SettingsService | None = None
    ) -> None:
        """Initialize the service with a database session."""
        self.db = db
        self.settings_service = settings_service or SettingsService(db)

    def get(self, city_id: int) -> City:
        city = self.db.get(City, city_id)
        if city is None:
            raise NotFoundError("City", city_id)
        return city

    def get_by_slug(self, slug: str) -> City:
        city = self.db.query(City).filter(City.slug == slug).one_or_none()
        if city is None:
            raise NotFoundError("City", slug)
        return city

    def list_cities(self, approved_only: bool = True) -> list[dict[str, Any]]:
        """Return cities with their recipe counts."""
        join_on = Recipe.city_id == City.id
        if approved_only:
            join_on = join_on & (Recipe.status == RecipeStatusEnum.APPROVED)
        usage = func.count(Recipe.id).label("recipes_count")
        rows = (
            self.db.query(City, usage)
            .outerjoin(Recipe, join_on)
            .group_by(City.id)
            .order_by(City.name)
            .all()
        )
        return [city_view(city, count) for city, count in rows]

    def _slug_for(self, name: str, exclude_id: int | None = None) -> str:
        slug = slugify(name)
        query = self.db.query(City.id).filter(City.slug == slug)
        if exclude_id is not None:
            query = query.filter(City.id != exclude_id)
        return unique_slug(name) if query.first() is not None else slug

    def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError.for_field("name", "The city name is required.")
        query = self.db.query(City.id).filter(City.name == cleaned)
        if exclude_id is not None:
            query = query.filter(City.id != exclude_id)
        if query.first() is not None:
            raise ValidationError.for_field("name", "This city already exists.")
        return cleaned

    def create(
        self,
        name: str,
        description: str | None = None,
        image_path: str | None = None,
    ) -> City:
        cleaned = self._ensure_unique_name(name)
        city = City(
            name=cleaned,
            slug=self._slug_for(cleaned),
            description=description,
            image_path=image_path,
        )
        self.db.add(city)
        self.db.commit()
        _log.info("Created city {} ({})", city.id, city.name)
        return city

    def update(self, city_id: int, changes: dict[str, Any]) -> City:
        """Apply ``changes``; renaming regenerates the slug."""
        city = self.get(city_id)
        if "name" in changes and changes["name"] is not None:
            cleaned = self._ensure_unique_name(changes["name"], exclude_id=city_id)
            if cleaned != city.name:
                city.name = cleaned
                city.slug = self._slug_for(cleaned, exclude_id=city_id)
        if "description" in changes:
            city.description = changes["description"]
        if "image_path" in changes and changes["image_path"] != city.image_path:
            delete_media(city.image_path)
            city.image_path = changes["image_path"]
        self.db.commit()
        return city

    def delete(self, city_id: int) -> int:
        """Delete one city. See ``delete_many``."""
        return self.delete_many([city_id])

    def delete_many(self, city_ids: list[int]) -> int:
        """Delete cities after moving their recipes to the default city.

        Returns:
            int: Number of recipes that were reassigned.

        Raises:
            ConflictError: If recipes need moving and no default city is configured,
                or the default city is among those being deleted. Nothing is changed
                in either case.
        """
        ids = set(city_ids)
        cities = self.db.query(City).filter(City.id.in_(ids)).all()
        if len(cities) != len(ids):
            raise ValidationError.for_field("ids", "Some cities do not exist.")

        default_city_id = self.settings_service.load().default_city_id
        if default_city_id in ids:
            raise ConflictError("The default city cannot be deleted.")
        dependents = self.db.query(Recipe.id).filter(Recipe.city_id.in_(ids)).count()
        if dependents and (
            default_city_id is None or self.db.get(City, default_city_id) is None
        ):
            raise ConflictError(
                "Set a default city in the settings before deleting cities "
                "that recipes belong to."
            )

        result = self.db.execute(
            update(Recipe)
            .where(Recipe.city_id.in_(ids))
            .values(city_id=default_city_id)
            .execution_options(synchronize_session="fetch")
        )
        image_paths = [city.image_path for city in cities]
        for city in cities:
            # A stale recipes collection would null out the reassigned city_id
            self.db.expire(city, ["recipes"])
            self.db.delete(city)
        self.db.commit()
        for path in image_paths:
            delete_media(path)
        _log.info(
            "Deleted cities {}; moved {} recipes to default city {}",
            sorted(ids),
            result.rowcount,
            default_city_id,
        )
        return result.rowcount
