"""Pydantic schema for filing a report."""

from pydantic import Field

from sufra.api.v1.schemas.base_schema import BaseSchema
from sufra.enums.report_enums import ReportableTypeEnum, ReportTypeEnum


class ReportCreateRequest(BaseSchema):
    """Request schema for reporting a recipe or a list."""

    reportable_type: ReportableTypeEnum
    reportable_id: int
    type: ReportTypeEnum
    message: str = Field(..., min_length=1, max_length=1000)
