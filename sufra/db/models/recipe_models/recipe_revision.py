"""Recipe Revision model definition.

Defines the append-only history of a recipe. Each row stores the detailed read
representation at that moment plus the foreign keys it was rendered from, so a
revision can be restored exactly.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, utcnow

if TYPE_CHECKING:
    from sufra.db.models.recipe_models.recipe import Recipe
    from sufra.db.models.user_models.user import User


class RecipeRevision(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'recipe_revisions' table."""

    __tablename__ = "recipe_revisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    change_summary: Mapped[str] = mapped_column(String(255), nullable=False)
    # Normalized references behind the snapshot; not foreign keys so later deletes
    # of the referenced rows never rewrite history.
    city_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    owner_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    anonymous_author_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    image_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    tag_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="revisions")
    user: Mapped["User | None"] = relationship("User", lazy="joined")
