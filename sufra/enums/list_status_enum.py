"""Enum for recipe list publishing states."""

from enum import Enum


class ListStatusEnum(str, Enum):
    """Publishing state of a recipe list."""

    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    REJECTED = "rejected"
    PRIVATE = "private"
