"""Tag model definition."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, utcnow
from sufra.db.models.recipe_models.recipe_tag_junction import recipe_tag_junction

if TYPE_CHECKING:
    from sufra.db.models.recipe_models.recipe import Recipe


class Tag(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'tags' table.

    Tags are matched by exact name; there is no normalization.
    """

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    recipes: Mapped[list["Recipe"]] = relationship(
        "Recipe",
        secondary=recipe_tag_junction,
        back_populates="tags",
        passive_deletes=True,
    )
