"""Logging sink definitions.

Each entry of the ``sinks`` array in config/logging.json becomes one LoggingSink, which
sufra.core.logging turns into a loguru ``logger.add`` call.
"""

from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class LoggingSink:
    """One loguru sink.

    Attributes:
        sink: ``"sys.stdout"`` or a file path.
        level: Minimum level written to the sink.
        serialize: Emit loguru's JSON records instead of formatted text.
        rotation / retention / compression: File sink housekeeping, passed through.
        backtrace / diagnose: Extended traceback rendering.
        enqueue: Write through a multiprocessing-safe queue.
        colorize: Force colored output on or off.
        catch: Swallow errors raised by the sink itself.
    """

    sink: str
    level: str = "INFO"
    serialize: bool = False
    rotation: str | None = None
    retention: str | None = None
    compression: str | None = None
    backtrace: bool = False
    diagnose: bool = False
    enqueue: bool = False
    colorize: bool | None = None
    catch: bool = True

    @property
    def is_stdout(self) -> bool:
        return self.sink == "sys.stdout"

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "LoggingSink":
        """Build a sink from a config entry, ignoring unknown keys.

        Raises:
            ValueError: If the entry has no ``sink`` target.
        """
        if not data.get("sink"):
            raise ValueError("Logging sink entry is missing the 'sink' target")
        known = {f.name for f in fields(LoggingSink)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        return LoggingSink(**values)
