"""Enum for recipe difficulty levels.

Defines the levels of difficulty that can be given to a recipe. Values are the Arabic
labels stored in the database and shown to readers.
"""

from enum import Enum


class DifficultyLevelEnum(str, Enum):
    """Difficulty levels for recipes.

    Each member represents a supported difficulty level for a recipe.
    """

    VERY_EASY = "سهلة جداً"
    EASY = "سهلة"
    MEDIUM = "متوسطة"
    HARD = "صعبة"
    VERY_HARD = "صعبة جداً"
