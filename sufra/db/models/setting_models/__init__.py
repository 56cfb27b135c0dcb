"""Setting Models package initializer."""

from .setting import Setting

__all__ = ["Setting"]
