"""Prompts used with the completion API."""

from .base import BasePrompt
from .recipe_structuring import (
    IngredientGroupResult,
    RecipeStructureResult,
    RecipeStructuringPrompt,
    StepGroupResult,
    StructuredIngredient,
)
from .recipe_tagging import RecipeTaggingPrompt, RecipeTagsResult

__all__ = [
    "BasePrompt",
    "IngredientGroupResult",
    "RecipeStructureResult",
    "RecipeStructuringPrompt",
    "RecipeTaggingPrompt",
    "RecipeTagsResult",
    "StepGroupResult",
    "StructuredIngredient",
]
