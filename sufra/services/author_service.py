"""Anonymous author management."""

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.helpers import find_or_create
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.taxonomy_models.anonymous_author import AnonymousAuthor
from sufra.exceptions.custom_exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)

_log = get_logger(__name__)


class AuthorService:
    """Find-or-create and CRUD for anonymous authors."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def get(self, author_id: int) -> AnonymousAuthor:
        author = self.db.get(AnonymousAuthor, author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        return author

    def find_or_create(self, name: str) -> AnonymousAuthor:
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError.for_field(
                "manual_author_name", "The author name is required."
            )
        author, created = find_or_create(
            self.db,
            AnonymousAuthor,
            {"name": cleaned},
            lambda: AnonymousAuthor(name=cleaned),
        )
        if created:
            _log.info("Created anonymous author {} ({})", author.id, cleaned)
        return author

    def list_authors(self) -> list[dict[str, Any]]:
        usage = func.count(Recipe.id).label("recipes_count")
        rows = (
            self.db.query(AnonymousAuthor, usage)
            .outerjoin(Recipe, Recipe.anonymous_author_id == AnonymousAuthor.id)
            .group_by(AnonymousAuthor.id)
            .order_by(AnonymousAuthor.name)
            .all()
        )
        return [
            {
                "id": author.id,
                "name": author.name,
                "bio": author.bio,
                "recipes_count": count,
            }
            for author, count in rows
        ]

    def create(self, name: str, bio: str | None = None) -> AnonymousAuthor:
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError.for_field("name", "The author name is required.")
        exists = self.db.query(AnonymousAuthor.id).filter(
            AnonymousAuthor.name == cleaned
        )
        if exists.first() is not None:
            raise ConflictError(f"Author '{cleaned}' already exists.")
        author = AnonymousAuthor(name=cleaned, bio=bio)
        self.db.add(author)
        self.db.commit()
        return author

    def update(
        self, author_id: int, name: str | None = None, bio: str | None = None
    ) -> AnonymousAuthor:
        author = self.get(author_id)
        if name is not None:
            cleaned = name.strip()
            if not cleaned:
                raise ValidationError.for_field("name", "The author name is required.")
            clash = self.db.query(AnonymousAuthor.id).filter(
                AnonymousAuthor.name == cleaned, AnonymousAuthor.id != author_id
            )
            if clash.first() is not None:
                raise ConflictError(f"Author '{cleaned}' already exists.")
            author.name = cleaned
        if bio is not None:
            author.bio = bio
        self.db.commit()
        return author

    def delete(self, author_id: int) -> None:
        """Delete an author that no recipe is credited to."""
        author = self.get(author_id)
        in_use = self.db.query(Recipe.id).filter(
            Recipe.anonymous_author_id == author_id
        )
        if in_use.first() is not None:
            raise ConflictError(
                "This author still has recipes; reassign them before deleting."
            )
        self.db.delete(author)
        self.db.commit()
        _log.info("Deleted anonymous author {}", author_id)
