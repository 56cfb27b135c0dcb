"""Report route handlers for signed-in users."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.report_request import ReportCreateRequest
from sufra.deps.auth import RequiredActor
from sufra.deps.db import get_db
from sufra.services.report_service import ReportService

router = APIRouter(prefix="/v1/reports", tags=["reports"])

Db = Annotated[Session, Depends(get_db)]


@router.post("", status_code=status.HTTP_201_CREATED, summary="Report a recipe or list")
def create_report(
    body: ReportCreateRequest, db: Db, actor: RequiredActor
) -> dict[str, Any]:
    service = ReportService(db)
    return service.show(service.create(body, actor))


@router.get("/mine", summary="Reports filed by the current user")
def my_reports(db: Db, actor: RequiredActor) -> list[dict[str, Any]]:
    return ReportService(db).my_reports(actor)
