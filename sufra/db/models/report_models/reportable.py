"""Report target variants."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecipeRef:
    """A report about a recipe."""

    recipe_id: int


@dataclass(frozen=True)
class ListRef:
    """A report about a recipe list."""

    list_id: int


Reportable = RecipeRef | ListRef
