"""Content reports filed by users about recipes and lists."""

from typing import Any

from sqlalchemy.orm import Session

from sufra.api.v1.schemas.request.report_request import ReportCreateRequest
from sufra.core.logging import get_logger
from sufra.db.models.list_models.recipe_list import RecipeList
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.report_models.report import Report
from sufra.db.models.report_models.reportable import ListRef, RecipeRef, Reportable
from sufra.db.models.user_models.user import User
from sufra.enums.bulk_action_enums import ReportBulkActionEnum
from sufra.enums.report_enums import (
    ReportableTypeEnum,
    ReportStatusEnum,
    ReportTypeEnum,
)
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)

_log = get_logger(__name__)


def report_view(report: Report, target_name: str | None = None) -> dict[str, Any]:
    return {
        "id": report.id,
        "user_id": report.user_id,
        "user_name": report.user.public_name if report.user else None,
        "reportable_type": report.reportable_type.value,
        "reportable_id": report.reportable_id,
        "reportable_name": target_name,
        "type": report.type.value,
        "message": report.message,
        "status": report.status.value,
        "admin_note": report.admin_note,
        "admin_reply": report.admin_reply,
        "created_at": report.created_at.isoformat(),
    }


class ReportService:
    """Filing, triage and cleanup of reports."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def get(self, report_id: int) -> Report:
        report = self.db.get(Report, report_id)
        if report is None:
            raise NotFoundError("Report", report_id)
        return report

    def _target_name(self, target: Reportable) -> str | None:
        match target:
            case RecipeRef(recipe_id=recipe_id):
                recipe = self.db.get(Recipe, recipe_id)
                return recipe.name if recipe else None
            case ListRef(list_id=list_id):
                recipe_list = self.db.get(RecipeList, list_id)
                return recipe_list.name if recipe_list else None
        return None

    def _view(self, report: Report) -> dict[str, Any]:
        return report_view(report, self._target_name(report.reportable))

    def create(self, data: ReportCreateRequest, actor: User) -> Report:
        """File a report; the reported recipe or list must exist."""
        target: Reportable
        if ReportableTypeEnum(data.reportable_type) == ReportableTypeEnum.RECIPE:
            target = RecipeRef(data.reportable_id)
        else:
            target = ListRef(data.reportable_id)
        if self._target_name(target) is None:
            raise ValidationError.for_field(
                "reportable_id", "The reported item does not exist."
            )
        report = Report(
            user_id=actor.id,
            type=ReportTypeEnum(data.type),
            message=data.message,
            status=ReportStatusEnum.PENDING,
        )
        report.reportable = target
        self.db.add(report)
        self.db.commit()
        _log.info(
            "User {} reported {} {}",
            actor.id,
            report.reportable_type.value,
            report.reportable_id,
        )
        return report

    def show(self, report: Report) -> dict[str, Any]:
        return self._view(report)

    def my_reports(self, actor: User) -> list[dict[str, Any]]:
        reports = (
            self.db.query(Report)
            .filter(Report.user_id == actor.id)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .all()
        )
        return [self._view(report) for report in reports]

    def index(
        self,
        actor: User,
        status: ReportStatusEnum | None = None,
        report_type: ReportTypeEnum | None = None,
    ) -> list[dict[str, Any]]:
        self._ensure_moderator(actor)
        query = self.db.query(Report)
        if status is not None:
            query = query.filter(Report.status == ReportStatusEnum(status))
        if report_type is not None:
            query = query.filter(Report.type == ReportTypeEnum(report_type))
        reports = query.order_by(Report.created_at.desc(), Report.id.desc()).all()
        return [self._view(report) for report in reports]

    def update(self, report_id: int, changes: dict[str, Any], actor: User) -> Report:
        """Set status, internal note or the reply shown to the reporter."""
        self._ensure_moderator(actor)
        report = self.get(report_id)
        if changes.get("status") is not None:
            report.status = ReportStatusEnum(changes["status"])
        for key in ("admin_note", "admin_reply"):
            if key in changes:
                setattr(report, key, changes[key])
        self.db.commit()
        _log.info("Report {} updated by user {}", report_id, actor.id)
        return report

    def delete(self, report_id: int, actor: User) -> None:
        self._ensure_admin(actor)
        self.db.delete(self.get(report_id))
        self.db.commit()

    def bulk(
        self,
        ids: list[int],
        action: ReportBulkActionEnum,
        actor: User,
        status: ReportStatusEnum | None = None,
    ) -> dict[str, Any]:
        action = ReportBulkActionEnum(action)
        query = self.db.query(Report).filter(Report.id.in_(ids))
        match action:
            case ReportBulkActionEnum.DELETE:
                self._ensure_admin(actor)
                count = query.delete(synchronize_session=False)
            case ReportBulkActionEnum.MARK_STATUS:
                self._ensure_moderator(actor)
                if status is None:
                    raise ValidationError.for_field(
                        "status", "A target status is required."
                    )
                count = query.update(
                    {Report.status: ReportStatusEnum(status)},
                    synchronize_session=False,
                )
        self.db.commit()
        _log.info("User {} applied {} to {} reports", actor.id, action.value, count)
        return {
            "message": f"Applied {action.value} to {count} reports.",
            "count": count,
        }

    @staticmethod
    def _ensure_moderator(actor: User) -> None:
        if not actor.can_approve_recipes:
            raise AuthorizationError(f"User {actor.id} may not manage reports")

    @staticmethod
    def _ensure_admin(actor: User) -> None:
        if not actor.can_delete_recipes:
            raise AuthorizationError(f"User {actor.id} may not delete reports")
