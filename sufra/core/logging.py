"""Logging setup and configuration using Loguru.

Sinks come from config/logging.json. The console sink uses a colored format that shows
the request id when one is bound; file sinks use a flat single-line format.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger

if TYPE_CHECKING:
    from loguru import Logger

from sufra.core.config.config import settings
from sufra.core.config.logging_sink import LoggingSink

_FILE_FORMAT = (
    "{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level: <8} | {extra[name]} | "
    "{extra[request_id]} | {message}"
)
_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
    "{extra[request_sep]}<blue>{extra[request_tag]}</blue> | <level>{message}</level>"
)


def _tag_request(record: dict[str, Any]) -> bool:
    request_id = record["extra"].get("request_id")
    bound = bool(request_id) and request_id != "-"
    record["extra"]["request_tag"] = request_id if bound else ""
    record["extra"]["request_sep"] = " | " if bound else ""
    return True


def _sink_kwargs(sink: LoggingSink) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "level": sink.level,
        "serialize": sink.serialize,
        "backtrace": sink.backtrace,
        "diagnose": sink.diagnose,
        "enqueue": sink.enqueue,
        "catch": sink.catch,
    }
    if sink.is_stdout:
        kwargs["format"] = _CONSOLE_FORMAT
        kwargs["filter"] = _tag_request
        kwargs["colorize"] = True if sink.colorize is None else sink.colorize
        return kwargs

    kwargs["format"] = _FILE_FORMAT
    kwargs["colorize"] = bool(sink.colorize)
    for option in ("rotation", "retention", "compression"):
        value = getattr(sink, option)
        if value:
            kwargs[option] = value
    return kwargs


def configure_logging() -> None:
    """Configure global application logging using Loguru and the configured sinks."""
    # Keep HTTP client and connection pool chatter out of the application log
    for noisy in ("httpx", "httpcore", "sqlalchemy.engine.Engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    loguru_logger.remove()

    def patch_record(record: dict[str, Any]) -> None:
        record["extra"].setdefault("request_id", "-")
        record["extra"].setdefault("name", record["name"])

    loguru_logger.configure(patcher=patch_record)

    for sink in settings.logging_sinks:
        if sink.is_stdout:
            loguru_logger.add(sys.stdout, **_sink_kwargs(sink))
            continue
        log_path = Path(sink.sink).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        loguru_logger.add(str(log_path), **_sink_kwargs(sink))


def get_logger(name: str | None = None) -> "Logger":
    """Retrieve a configured Loguru logger instance.

    Args:
        name (str | None): Optional logical name to bind to the logger.

    Returns:
        A Loguru logger, optionally bound with a custom name.
    """
    return loguru_logger.bind(name=name) if name else loguru_logger
