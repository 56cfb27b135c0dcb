"""User Models package initializer."""

from .user import User

__all__ = ["User"]
