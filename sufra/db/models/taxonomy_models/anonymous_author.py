"""Anonymous author model definition."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, utcnow

if TYPE_CHECKING:
    from sufra.db.models.recipe_models.recipe import Recipe


class AnonymousAuthor(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'anonymous_authors' table.

    Credits a recipe to a named person who has no account, typically for recipes a
    moderator enters on someone's behalf.
    """

    __tablename__ = "anonymous_authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    recipes: Mapped[list["Recipe"]] = relationship(
        "Recipe", back_populates="anonymous_author"
    )
