"""Recipe Models package initializer.

This package contains ORM models representing the recipe aggregate: the recipe, its
ingredient and tag pivots, and its revision history.
"""

from .recipe import Recipe
from .recipe_ingredient import RecipeIngredient
from .recipe_owner import AnonymousOwner, RecipeOwner, UserOwner
from .recipe_revision import RecipeRevision
from .recipe_tag_junction import recipe_tag_junction

__all__ = [
    "AnonymousOwner",
    "Recipe",
    "RecipeIngredient",
    "RecipeOwner",
    "RecipeRevision",
    "UserOwner",
    "recipe_tag_junction",
]
