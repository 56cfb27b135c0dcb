"""Query helpers shared by services."""

from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.models.base_database_model import BaseDatabaseModel

_log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseDatabaseModel)


def find_or_create(
    db: Session,
    model: type[ModelT],
    lookup: dict[str, Any],
    factory: Callable[[], ModelT],
) -> tuple[ModelT, bool]:
    """Return the row matching ``lookup``, inserting ``factory()`` when absent.

    The insert runs in a SAVEPOINT. If a concurrent writer inserted the same key
    first, the unique constraint fires, the savepoint is rolled back and the winning
    row is fetched instead. Violations of any other constraint are re-raised.

    Args:
        db: Active session.
        model: Mapped class to query.
        lookup: Column values that identify the row (must be covered by a unique
            constraint).
        factory: Builds the new instance when none exists.

    Returns:
        tuple[ModelT, bool]: The row and whether it was created by this call.
    """
    existing = db.query(model).filter_by(**lookup).one_or_none()
    if existing is not None:
        return existing, False

    instance = factory()
    try:
        with db.begin_nested():
            db.add(instance)
    except IntegrityError:
        existing = db.query(model).filter_by(**lookup).one_or_none()
        if existing is None:
            # Some other constraint failed
            raise
        _log.info(
            "Lost insert race for {} {}; using the existing row",
            model.__name__,
            lookup,
        )
        return existing, False
    return instance, True


def paginate(query: Any, page: int, per_page: int) -> tuple[list[Any], int]:
    """Return one page of ``query`` and the total row count."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return items, total


def page_payload(
    items: list[Any], total: int, page: int, per_page: int
) -> dict[str, Any]:
    """Wrap one page of already rendered items with paging metadata."""
    return {
        "data": items,
        "meta": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "last_page": max(1, -(-total // per_page)),
        },
    }
