"""Recipe owner variants.

A recipe is owned by exactly one of a registered user or an anonymous author. The
variant is the only way owners are assigned, so the two foreign keys on the recipe row
can never both be set.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserOwner:
    """Recipe owned by a registered user."""

    user_id: int


@dataclass(frozen=True)
class AnonymousOwner:
    """Recipe credited to an anonymous author."""

    author_id: int


RecipeOwner = UserOwner | AnonymousOwner
