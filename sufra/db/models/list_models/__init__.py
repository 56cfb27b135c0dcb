"""List Models package initializer."""

from .list_item import ListItem
from .recipe_list import RecipeList

__all__ = [
    "ListItem",
    "RecipeList",
]
