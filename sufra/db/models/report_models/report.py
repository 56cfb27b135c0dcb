"""Report model definition."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sufra.db.models.base_database_model import BaseDatabaseModel, enum_column, utcnow
from sufra.db.models.report_models.reportable import ListRef, RecipeRef, Reportable
from sufra.enums.report_enums import (
    ReportableTypeEnum,
    ReportStatusEnum,
    ReportTypeEnum,
)

if TYPE_CHECKING:
    from sufra.db.models.user_models.user import User


class Report(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'reports' table.

    The target is stored as a (type, id) pair and exposed as a ``Reportable`` variant.
    """

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    reportable_type: Mapped[ReportableTypeEnum] = mapped_column(
        enum_column(ReportableTypeEnum, "reportable_type_enum"), nullable=False
    )
    reportable_id: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[ReportTypeEnum] = mapped_column(
        enum_column(ReportTypeEnum, "report_type_enum"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ReportStatusEnum] = mapped_column(
        enum_column(ReportStatusEnum, "report_status_enum"),
        nullable=False,
        default=ReportStatusEnum.PENDING,
        index=True,
    )
    admin_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_reply: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship("User", lazy="joined")

    @property
    def reportable(self) -> Reportable:
        if self.reportable_type == ReportableTypeEnum.RECIPE:
            return RecipeRef(self.reportable_id)
        return ListRef(self.reportable_id)

    @reportable.setter
    def reportable(self, target: Reportable) -> None:
        match target:
            case RecipeRef(recipe_id=recipe_id):
                self.reportable_type = ReportableTypeEnum.RECIPE
                self.reportable_id = recipe_id
            case ListRef(list_id=list_id):
                self.reportable_type = ReportableTypeEnum.LIST
                self.reportable_id = list_id
            case _:
                raise TypeError(f"Unsupported report target: {target!r}")
