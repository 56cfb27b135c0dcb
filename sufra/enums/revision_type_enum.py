"""Enum for recipe revision kinds.

The value doubles as the human readable change summary stored on the revision.
"""

from enum import Enum


class RevisionTypeEnum(str, Enum):
    """Why a revision was recorded."""

    CREATE = "Initial creation"
    UPDATE = "Update"
    RESTORE = "Restored from revision"
