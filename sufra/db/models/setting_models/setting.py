"""Setting model definition."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sufra.db.models.base_database_model import BaseDatabaseModel, utcnow


class Setting(BaseDatabaseModel):
    """SQLAlchemy ORM model for the 'settings' table.

    Raw key/value storage behind ``sufra.services.settings_service.PlatformSettings``.
    Values are strings; structured values are stored as JSON text.
    """

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
