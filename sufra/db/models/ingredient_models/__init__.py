"""Ingredient Models package initializer."""

from .ingredient import Ingredient

__all__ = ["Ingredient"]
