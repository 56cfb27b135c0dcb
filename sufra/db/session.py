"""Database session management.

Handles the creation and configuration of the engine and sessions used throughout the
application.
"""

from typing import Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from sufra.core.config.config import settings
from sufra.core.logging import get_logger

_log = get_logger(__name__)


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_size": 10,
        "max_overflow": 20,
    }


def configure_sqlite(target: Engine) -> None:
    """Make SQLite enforce foreign keys and honour SAVEPOINTs.

    pysqlite defers BEGIN on its own, which breaks nested transactions; the driver is
    put in autocommit mode and SQLAlchemy emits BEGIN itself.
    """

    @event.listens_for(target, "connect")
    def _on_connect(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(target, "begin")
    def _on_begin(connection: Any) -> None:
        connection.exec_driver_sql("BEGIN")


engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_kwargs(settings.database_url),
)
if settings.database_url.startswith("sqlite"):
    configure_sqlite(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    from sufra.db.models import BaseDatabaseModel  # noqa: PLC0415

    target = bind or engine
    BaseDatabaseModel.metadata.create_all(bind=target)
    _log.info("Database schema ensured on {}", target.url.render_as_string())


def check_database_health() -> bool:
    """Check if the database is available and responding.

    Returns:
        bool: True if database is healthy, False otherwise
    """
    try:
        with SessionLocal() as session:
            session.execute(text("SELECT 1"))
            return True
    except SQLAlchemyError as e:
        _log.debug("Database health check failed: {} ({})", str(e), type(e).__name__)
        return False
