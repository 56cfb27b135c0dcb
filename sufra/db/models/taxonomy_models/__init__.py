"""Taxonomy Models package initializer.

Shared reference data that recipes point at: cities, tags and anonymous authors.
"""

from .anonymous_author import AnonymousAuthor
from .city import City
from .tag import Tag

__all__ = [
    "AnonymousAuthor",
    "City",
    "Tag",
]
