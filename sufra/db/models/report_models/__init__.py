"""Report Models package initializer."""

from .report import Report
from .reportable import ListRef, RecipeRef, Reportable

__all__ = [
    "ListRef",
    "RecipeRef",
    "Report",
    "Reportable",
]
