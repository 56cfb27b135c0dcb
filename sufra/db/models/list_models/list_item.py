"""List Item model definition."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, utcnow

if TYPE_CHECKING:
    from sufra.db.models.list_models.recipe_list import RecipeList
    from sufra.db.models.recipe_models.recipe import Recipe


class ListItem(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'list_items' table.

    Membership of a recipe in a list, at a given position. A recipe appears at most
    once per list.
    """

    __tablename__ = "list_items"
    __table_args__ = (
        UniqueConstraint("list_id", "recipe_id", name="uq_list_items_list_recipe"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    list_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    recipe_list: Mapped["RecipeList"] = relationship(
        "RecipeList", back_populates="items"
    )
    recipe: Mapped["Recipe"] = relationship("Recipe", lazy="joined")
