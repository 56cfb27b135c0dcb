"""Standard library logging bridge.

Routes records emitted through the standard ``logging`` module (uvicorn, SQLAlchemy,
httpx) into Loguru so every line ends up in the configured sinks.
"""

import logging

from sufra.core.logging import get_logger

_stdlib_logger = get_logger("stdlib")


class InterceptHandler(logging.Handler):
    """Intercept standard logging and route to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to Loguru under the originating logger's name."""
        try:
            level: str | int = _stdlib_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        _stdlib_logger.bind(name=record.name).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())
