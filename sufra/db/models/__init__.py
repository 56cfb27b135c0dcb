"""Database models package.

Importing this package registers every ORM model on ``BaseDatabaseModel.metadata``.
"""

from .base_database_model import BaseDatabaseModel
from .ingredient_models import Ingredient
from .list_models import ListItem, RecipeList
from .recipe_models import (
    AnonymousOwner,
    Recipe,
    RecipeIngredient,
    RecipeOwner,
    RecipeRevision,
    UserOwner,
    recipe_tag_junction,
)
from .report_models import ListRef, RecipeRef, Report, Reportable
from .setting_models import Setting
from .taxonomy_models import AnonymousAuthor, City, Tag
from .user_models import User

__all__ = [
    "AnonymousAuthor",
    "AnonymousOwner",
    "BaseDatabaseModel",
    "City",
    "Ingredient",
    "ListItem",
    "ListRef",
    "Recipe",
    "RecipeIngredient",
    "RecipeList",
    "RecipeOwner",
    "RecipeRef",
    "RecipeRevision",
    "Report",
    "Reportable",
    "Setting",
    "Tag",
    "User",
    "UserOwner",
    "recipe_tag_junction",
]
