"""Database session dependency for FastAPI routes."""

from collections.abc import Generator

from sqlalchemy.orm import Session

from sufra.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request.

    Anything left uncommitted when the request ends is rolled back by ``close``.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
