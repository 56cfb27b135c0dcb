"""Enum for recipe moderation states."""

from enum import Enum


class RecipeStatusEnum(str, Enum):
    """Moderation state of a recipe.

    Only APPROVED recipes are visible to the public.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNPUBLISHED = "unpublished"
