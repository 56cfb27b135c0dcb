"""User model definition.

Registered accounts. Authentication happens upstream; this table only carries the
profile, role and ban state the platform needs.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.core.config.config import settings
from sufra.db.models.base_database_model import BaseDatabaseModel, enum_column, utcnow
from sufra.enums.user_role_enum import UserRoleEnum

if TYPE_CHECKING:
    from sufra.db.models.list_models.recipe_list import RecipeList


class User(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'users' table."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[UserRoleEnum] = mapped_column(
        enum_column(UserRoleEnum, "user_role_enum"),
        nullable=False,
        default=UserRoleEnum.USER,
    )
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ban_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    banned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    lists: Mapped[list["RecipeList"]] = relationship(
        "RecipeList",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        if self.role == UserRoleEnum.ADMIN:
            return True
        super_admin = settings.super_admin_email
        return bool(super_admin) and self.email == super_admin

    @property
    def is_moderator(self) -> bool:
        return self.role == UserRoleEnum.MODERATOR or self.is_admin

    @property
    def can_approve_recipes(self) -> bool:
        """Moderators and admins may approve, reject and unpublish content."""
        return self.is_moderator

    @property
    def can_delete_recipes(self) -> bool:
        """Only admins may hard-delete content."""
        return self.is_admin

    @property
    def public_name(self) -> str:
        return self.display_name or self.name
