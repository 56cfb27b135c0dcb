"""Recipe List model definition.

Defines user curated, ordered collections of recipes with their own publishing state.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, enum_column, utcnow
from sufra.enums.list_status_enum import ListStatusEnum

if TYPE_CHECKING:
    from sufra.db.models.list_models.list_item import ListItem
    from sufra.db.models.user_models.user import User


class RecipeList(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'lists' table.

    Every user has exactly one ``is_default`` list (their favorites). It can never be
    deleted and can never be public.
    """

    __tablename__ = "lists"
    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_lists_user_slug"),
        Index(
            "uq_lists_one_default_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("is_default = 1"),
            postgresql_where=text("is_default"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[ListStatusEnum] = mapped_column(
        enum_column(ListStatusEnum, "list_status_enum"),
        nullable=False,
        default=ListStatusEnum.DRAFT,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="lists")
    items: Mapped[list["ListItem"]] = relationship(
        "ListItem",
        back_populates="recipe_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ListItem.position",
        lazy="selectin",
    )

    @property
    def recipe_count(self) -> int:
        return len(self.items)

    def contains(self, recipe_id: int) -> bool:
        return any(item.recipe_id == recipe_id for item in self.items)
