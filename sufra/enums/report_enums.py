"""Enums describing user reports."""

from enum import Enum


class ReportableTypeEnum(str, Enum):
    """Kinds of content a report can point at."""

    RECIPE = "recipe"
    LIST = "list"


class ReportTypeEnum(str, Enum):
    """Why the report was filed."""

    CONTENT_ISSUE = "content_issue"
    FEEDBACK = "feedback"


class ReportStatusEnum(str, Enum):
    """Moderator handling state of a report."""

    PENDING = "pending"
    FIXED = "fixed"
    REJECTED = "rejected"
