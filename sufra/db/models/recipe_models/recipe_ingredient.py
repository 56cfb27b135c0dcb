"""Recipe Ingredient model definition.

Defines the pivot between a recipe and an ingredient together with the per-recipe
quantity, unit, descriptor and group label.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel

if TYPE_CHECKING:
    from sufra.db.models.ingredient_models.ingredient import Ingredient
    from sufra.db.models.recipe_models.recipe import Recipe


class RecipeIngredient(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'recipe_ingredient' table.

    Keyed by (recipe_id, ingredient_id): a recipe lists each ingredient once.
    """

    __tablename__ = "recipe_ingredient"

    recipe_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    ingredient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ingredients.id", ondelete="CASCADE"),
        primary_key=True,
    )
    amount: Mapped[str | None] = mapped_column(String(100), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(100), nullable=True)
    descriptor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    group: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    recipe: Mapped["Recipe"] = relationship(
        "Recipe", back_populates="ingredient_links"
    )
    ingredient: Mapped["Ingredient"] = relationship(
        "Ingredient", back_populates="recipe_links", lazy="joined"
    )
