"""Report repositories."""

from datetime import datetime

from sqlalchemy import delete
from sqlmodel import col, func, select

from src.app.entities.core._base import Repository
from src.app.entities.service.report.entity import (
    AnalyticalReport,
    AnalyticalReportType,
    Report,
    ReportPriority,
    ReportStatus,
)
from src.app.entities.service.report.table import AnalyticalReportTable, ReportTable


class ReportRepository(Repository[Report, ReportTable]):
    """Data-access layer for customer and admin reports."""

    entity_cls = Report
    table_cls = ReportTable

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        reporter_id: str | None = None,
        status: ReportStatus | None = None,
        type: str | None = None,
        priority: ReportPriority | None = None,
    ) -> tuple[list[Report], int]:
        conditions = []
        if reporter_id is not None:
            conditions.append(ReportTable.reporter_id == reporter_id)
        if status is not None:
            conditions.append(ReportTable.status == status)
        if type is not None:
            conditions.append(ReportTable.type == type)
        if priority is not None:
            conditions.append(ReportTable.priority == priority)
        statement = (
            select(ReportTable)
            .where(*conditions)
            .order_by(col(ReportTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count(*conditions)

    def count_grouped(self, column_name: str) -> dict[str, int]:
        column = getattr(ReportTable, column_name)
        statement = select(column, func.count()).group_by(column)
        return {
            getattr(key, "value", key): int(total)
            for key, total in self._session.exec(statement).all()
        }


class AnalyticalReportRepository(Repository[AnalyticalReport, AnalyticalReportTable]):
    """Data-access layer for analytical reports."""

    entity_cls = AnalyticalReport
    table_cls = AnalyticalReportTable

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        report_type: AnalyticalReportType | None = None,
    ) -> tuple[list[AnalyticalReport], int]:
        conditions = []
        if report_type is not None:
            conditions.append(AnalyticalReportTable.report_type == report_type)
        statement = (
            select(AnalyticalReportTable)
            .where(*conditions)
            .order_by(col(AnalyticalReportTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count(*conditions)

    def delete_expired(self, now: datetime) -> int:
        statement = delete(AnalyticalReportTable).where(
            col(AnalyticalReportTable.expires_at).is_not(None),
            col(AnalyticalReportTable.expires_at) < now,
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        return int(result.rowcount or 0)
