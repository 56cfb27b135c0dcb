"""Base database models and common ORM definitions.

Defines the base class and column helpers shared by all database models in the
application.
"""

import enum
from datetime import UTC, datetime
from typing import Any

import orjson
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def enum_column(enum_cls: type[enum.Enum], name: str) -> SAEnum:
    """Build a portable enum column type that stores member values.

    Args:
        enum_cls: The ``str`` enum to persist.
        name: Database name of the enum type.

    Returns:
        SAEnum: A VARCHAR-backed enum type without a CHECK constraint.
    """
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


class BaseDatabaseModel(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models.

    Inherits from:
        DeclarativeBase: SQLAlchemy's declarative base class for ORM models.

    All ORM models in the application inherit from this class so they share one
    metadata object and a readable representation.
    """

    def __repr__(self) -> str:
        """Return a JSON representation of the loaded column values."""
        return self._to_json()

    def _to_json(self) -> str:
        def serialize(obj: object) -> Any:
            if isinstance(obj, enum.Enum):
                return obj.value
            if hasattr(obj, "isoformat"):
                return obj.isoformat()
            return obj

        # Only already-loaded attributes, so repr never triggers a lazy load
        data = {
            key: serialize(value)
            for key, value in vars(self).items()
            if not key.startswith("_")
            and not isinstance(value, (list, BaseDatabaseModel))
        }
        data["__model__"] = type(self).__name__
        return orjson.dumps(data, default=str).decode()
