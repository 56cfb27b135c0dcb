"""Ingredient model definition.

Defines the shared ingredient vocabulary. Rows are created lazily the first time a
recipe mentions an ingredient and are keyed by their normalized name.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, utcnow

if TYPE_CHECKING:
    from sufra.db.models.recipe_models.recipe_ingredient import RecipeIngredient


class Ingredient(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'ingredients' table.

    ``name`` keeps the first display spelling seen; ``normalized_name`` is the dedupe
    key produced by ``sufra.utils.ingredient_normalizer.normalize``.
    """

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    normalized_name: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    recipe_links: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient",
        back_populates="ingredient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
