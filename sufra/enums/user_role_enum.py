"""Enum for user roles."""

from enum import Enum


class UserRoleEnum(str, Enum):
    """Roles a registered user can hold.

    MODERATOR may approve content; only ADMIN may delete it.
    """

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
