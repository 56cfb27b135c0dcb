"""Recipe model definition.

Defines the data model for a recipe entity, capturing the necessary fields and
relationships for storing recipes and their moderation state.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, enum_column, utcnow
from sufra.db.models.recipe_models.recipe_owner import (
    AnonymousOwner,
    RecipeOwner,
    UserOwner,
)
from sufra.db.models.recipe_models.recipe_tag_junction import recipe_tag_junction
from sufra.enums.difficulty_level_enum import DifficultyLevelEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum

if TYPE_CHECKING:
    from sufra.db.models.recipe_models.recipe_ingredient import RecipeIngredient
    from sufra.db.models.recipe_models.recipe_revision import RecipeRevision
    from sufra.db.models.taxonomy_models.anonymous_author import AnonymousAuthor
    from sufra.db.models.taxonomy_models.city import City
    from sufra.db.models.taxonomy_models.tag import Tag
    from sufra.db.models.user_models.user import User


class Recipe(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'recipes' table.

    Represents a recipe entity with attributes corresponding to the database schema.
    Ownership goes through ``owner`` / ``assign_owner``; status changes go through
    ``sufra.services.recipe_state_machine``.
    """

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    image_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    servings: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Free text, a list of strings, or an ordered list of {name, items[]} groups
    time_needed: Mapped[Any] = mapped_column(JSON, nullable=True)
    difficulty: Mapped[DifficultyLevelEnum | None] = mapped_column(
        enum_column(DifficultyLevelEnum, "difficulty_level_enum"),
        nullable=True,
    )
    status: Mapped[RecipeStatusEnum] = mapped_column(
        enum_column(RecipeStatusEnum, "recipe_status_enum"),
        nullable=False,
        default=RecipeStatusEnum.PENDING,
        index=True,
    )
    needs_reapproval: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    rejection_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    steps: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )
    anonymous_author_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("anonymous_authors.id"), nullable=True
    )
    city_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("cities.id"), nullable=True, index=True
    )
    approved_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped["User | None"] = relationship("User", foreign_keys=[user_id])
    approver: Mapped["User | None"] = relationship("User", foreign_keys=[approved_by])
    anonymous_author: Mapped["AnonymousAuthor | None"] = relationship(
        "AnonymousAuthor", back_populates="recipes"
    )
    city: Mapped["City | None"] = relationship("City", back_populates="recipes")
    ingredient_links: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RecipeIngredient.sort_order",
        lazy="selectin",
    )
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=recipe_tag_junction,
        back_populates="recipes",
        order_by="Tag.id",
        passive_deletes=True,
        lazy="selectin",
    )
    revisions: Mapped[list["RecipeRevision"]] = relationship(
        "RecipeRevision",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def owner(self) -> RecipeOwner | None:
        """Return who owns the recipe, or None for legacy rows with no owner."""
        if self.anonymous_author_id is not None:
            return AnonymousOwner(self.anonymous_author_id)
        if self.user_id is not None:
            return UserOwner(self.user_id)
        return None

    def assign_owner(self, owner: RecipeOwner) -> None:
        """Point the recipe at exactly one owner, clearing the other reference."""
        match owner:
            case UserOwner(user_id=user_id):
                self.user_id = user_id
                self.anonymous_author_id = None
            case AnonymousOwner(author_id=author_id):
                self.anonymous_author_id = author_id
                self.user_id = None
            case _:
                raise TypeError(f"Unsupported recipe owner: {owner!r}")

    @property
    def is_anonymous(self) -> bool:
        return self.anonymous_author_id is not None

    def is_owned_by(self, user_id: int | None) -> bool:
        return user_id is not None and self.owner == UserOwner(user_id)
