"""Enums for admin bulk actions.

Each collection managed from the back office accepts its own fixed set of actions.
"""

from enum import Enum


class RecipeBulkActionEnum(str, Enum):
    """Bulk actions over recipes."""

    DELETE = "delete"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    CHANGE_STATUS = "change_status"


class ListBulkActionEnum(str, Enum):
    """Bulk actions over recipe lists."""

    DELETE = "delete"
    APPROVE = "approve"
    REJECT = "reject"
    UNPUBLISH = "unpublish"


class UserBulkActionEnum(str, Enum):
    """Bulk actions over users."""

    DELETE = "delete"
    BAN = "ban"
    UNBAN = "unban"


class ReportBulkActionEnum(str, Enum):
    """Bulk actions over reports."""

    DELETE = "delete"
    MARK_STATUS = "mark_status"
