"""Customer/admin reports and generated analytical reports."""

from datetime import timedelta
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from src.app.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.app.core.models import PageParams
from src.app.core.services.report.analytics import REPORT_BUILDERS, ReportFilters
from src.app.entities.core._base import utc_now
from src.app.entities.core.user.entity import User
from src.app.entities.service.report.entity import (
    AnalyticalReport,
    AnalyticalReportType,
    JobStatus,
    Report,
    ReportPriority,
    ReportSource,
    ReportStatus,
)
from src.app.entities.service.report.repository import (
    AnalyticalReportRepository,
    ReportRepository,
)
from src.app.runtime.context import get_config


class ReportService:
    def __init__(self, db_session: Session):
        self._db = db_session
        self._reports = ReportRepository(db_session)
        self._analytical = AnalyticalReportRepository(db_session)

    # Customer and admin reports

    def create(self, reporter: User, data: dict[str, Any]) -> Report:
        report = self._reports.create(
            Report(
                **data,
                reporter_id=reporter.id,
                source=ReportSource.ADMIN if reporter.is_admin else ReportSource.CUSTOMER,
            )
        )
        logger.bind(report_id=report.id, type=report.type, priority=report.priority.value).info(
            "report.created"
        )
        return report

    def list_reports(
        self,
        user: User,
        params: PageParams,
        *,
        status: ReportStatus | None = None,
        type: str | None = None,
        priority: ReportPriority | None = None,
    ) -> tuple[list[Report], int]:
        return self._reports.list_page(
            offset=params.offset,
            limit=params.limit,
            reporter_id=None if user.is_admin else user.id,
            status=status,
            type=type,
            priority=priority,
        )

    def get(self, user: User, report_id: str) -> Report:
        report = self._reports.get(report_id)
        if report is None:
            raise NotFoundError("Report not found")
        if report.reporter_id != user.id and not user.is_admin:
            raise PermissionDeniedError("You do not have access to this report")
        return report

    def update(
        self,
        admin: User,
        report_id: str,
        *,
        status: ReportStatus | None = None,
        priority: ReportPriority | None = None,
        assignee_id: str | None = None,
        resolution: str | None = None,
    ) -> Report:
        report = self.get(admin, report_id)
        if status is not None:
            report.set_status(status)
        if priority is not None:
            report.priority = priority
        if assignee_id is not None:
            report.assignee_id = assignee_id
        if resolution is not None:
            report.resolution = resolution
        report = self._reports.update(report)
        logger.bind(report_id=report.id, status=report.status.value).info("report.updated")
        return report

    def delete(self, report_id: str) -> None:
        if not self._reports.delete(report_id):
            raise NotFoundError("Report not found")
        logger.bind(report_id=report_id).info("report.deleted")

    def stats(self) -> dict[str, Any]:
        return {
            "total": self._reports.count(),
            "by_status": self._reports.count_grouped("status"),
            "by_type": self._reports.count_grouped("type"),
            "by_priority": self._reports.count_grouped("priority"),
        }

    # Analytical reports

    def generate(
        self,
        admin: User,
        name: str,
        report_type: AnalyticalReportType,
        filters: dict[str, Any] | None = None,
        expires_in_days: int | None = None,
    ) -> AnalyticalReport:
        filters = filters or {}
        try:
            parsed = ReportFilters.model_validate(filters)
        except PydanticValidationError as exc:
            errors = exc.errors(include_url=False, include_context=False, include_input=False)
            raise ValidationError("Invalid report filters", details={"errors": errors}) from exc
        if parsed.start_date and parsed.end_date and parsed.start_date > parsed.end_date:
            raise ValidationError("Start date must be before end date")

        days = expires_in_days or get_config().reports.default_expiry_days
        report = self._analytical.create(
            AnalyticalReport(
                name=name,
                report_type=report_type,
                status=JobStatus.PROCESSING,
                filters=filters,
                generated_by=admin.id,
                expires_at=utc_now() + timedelta(days=days),
            )
        )

        try:
            report.data = REPORT_BUILDERS[report_type](self._db, parsed)
            report.status = JobStatus.COMPLETED
        except Exception as exc:
            logger.bind(report_id=report.id, report_type=report_type.value).exception(
                "report.generation_failed"
            )
            report.data = {"error": str(exc)}
            report.status = JobStatus.FAILED

        report = self._analytical.update(report)
        logger.bind(
            report_id=report.id, report_type=report_type.value, status=report.status.value
        ).info("report.generated")
        return report

    def list_analytical(
        self, params: PageParams, report_type: AnalyticalReportType | None = None
    ) -> tuple[list[AnalyticalReport], int]:
        return self._analytical.list_page(
            offset=params.offset, limit=params.limit, report_type=report_type
        )

    def get_analytical(self, report_id: str) -> AnalyticalReport:
        report = self._analytical.get(report_id)
        if report is None:
            raise NotFoundError("Analytical report not found")
        return report

    def delete_analytical(self, report_id: str) -> None:
        if not self._analytical.delete(report_id):
            raise NotFoundError("Analytical report not found")
        logger.bind(report_id=report_id).info("report.analytical_deleted")

    def cleanup_expired(self) -> int:
        removed = self._analytical.delete_expired(utc_now())
        logger.bind(removed=removed).info("report.cleanup")
        return removed
