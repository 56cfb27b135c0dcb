"""Tag vocabulary management and recipe tag sync."""

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.helpers import find_or_create
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.recipe_models.recipe_tag_junction import recipe_tag_junction
from sufra.db.models.taxonomy_models.tag import Tag
from sufra.exceptions.custom_exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from sufra.utils.slugify import slugify, unique_slug

_log = get_logger(__name__)


class TagService:
    """Tags are matched by their exact (trimmed) name."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def _slug_for(self, name: str) -> str:
        slug = slugify(name)
        if self.db.query(Tag.id).filter(Tag.slug == slug).first() is not None:
            return unique_slug(name)
        return slug

    def find_or_create(self, name: str) -> Tag | None:
        """Return the tag called ``name``, creating it when missing."""
        cleaned = name.strip()
        if not cleaned:
            return None
        tag, created = find_or_create(
            self.db,
            Tag,
            {"name": cleaned},
            lambda: Tag(name=cleaned, slug=self._slug_for(cleaned)),
        )
        if created:
            _log.info("Created tag {} ({})", tag.id, cleaned)
        return tag

    def sync_recipe(self, recipe: Recipe, names: list[str]) -> list[Tag]:
        """Replace the recipe's tags with the tags named in ``names``."""
        tags: dict[int, Tag] = {}
        for name in names:
            tag = self.find_or_create(name)
            if tag is not None:
                tags[tag.id] = tag
        recipe.tags = list(tags.values())
        self.db.flush()
        return recipe.tags

    def sync_recipe_ids(self, recipe: Recipe, tag_ids: list[int]) -> list[Tag]:
        """Replace the recipe's tags with the existing tags among ``tag_ids``."""
        recipe.tags = (
            self.db.query(Tag).filter(Tag.id.in_(tag_ids)).order_by(Tag.id).all()
            if tag_ids
            else []
        )
        self.db.flush()
        return recipe.tags

    def all_names(self) -> list[str]:
        return [name for (name,) in self.db.query(Tag.name).order_by(Tag.name).all()]

    def list_tags(self, search: str | None = None) -> list[dict[str, Any]]:
        """Return tags with how many recipes use each."""
        usage = func.count(recipe_tag_junction.c.recipe_id).label("recipes_count")
        query = (
            self.db.query(Tag, usage)
            .outerjoin(recipe_tag_junction, recipe_tag_junction.c.tag_id == Tag.id)
            .group_by(Tag.id)
        )
        if search and search.strip():
            query = query.filter(Tag.name.contains(search.strip(), autoescape=True))
        return [
            {"id": tag.id, "name": tag.name, "slug": tag.slug, "recipes_count": count}
            for tag, count in query.order_by(Tag.name).all()
        ]

    def create(self, name: str) -> Tag:
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError.for_field("name", "The tag name is required.")
        if self.db.query(Tag.id).filter(Tag.name == cleaned).first() is not None:
            raise ConflictError(f"Tag '{cleaned}' already exists.")
        tag = Tag(name=cleaned, slug=self._slug_for(cleaned))
        self.db.add(tag)
        self.db.commit()
        return tag

    def update(self, tag_id: int, name: str) -> Tag:
        tag = self.db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError.for_field("name", "The tag name is required.")
        clash = (
            self.db.query(Tag.id).filter(Tag.name == cleaned, Tag.id != tag_id).first()
        )
        if clash is not None:
            raise ConflictError(f"Tag '{cleaned}' already exists.")
        if cleaned != tag.name:
            tag.name = cleaned
            tag.slug = self._slug_for(cleaned)
        self.db.commit()
        return tag

    def delete_many(self, tag_ids: list[int]) -> int:
        """Delete tags; recipe associations go with them."""
        tags = self.db.query(Tag).filter(Tag.id.in_(tag_ids)).all()
        if len(tags) != len(set(tag_ids)):
            raise ValidationError.for_field("ids", "Some tags do not exist.")
        self.db.execute(
            recipe_tag_junction.delete().where(
                recipe_tag_junction.c.tag_id.in_(tag_ids)
            )
        )
        for tag in tags:
            self.db.delete(tag)
        self.db.commit()
        _log.info("Deleted {} tags", len(tags))
        return len(tags)
