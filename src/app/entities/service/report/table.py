"""Report database table models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.report.entity import (
    AnalyticalReportType,
    JobStatus,
    ReportPriority,
    ReportSource,
    ReportStatus,
)


class ReportTable(EntityTable, table=True):
    """Database persistence model for customer and admin reports."""

    __tablename__ = "reports"

    source: ReportSource = ReportSource.CUSTOMER
    reporter_id: str = Field(foreign_key="users.id", index=True)
    assignee_id: str | None = None
    type: str = Field(index=True)
    title: str
    description: str
    priority: ReportPriority = ReportPriority.MEDIUM
    status: ReportStatus = Field(default=ReportStatus.PENDING, index=True)
    target_type: str | None = None
    target_id: str | None = None
    attachments: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    tags: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    details: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    resolution: str | None = None
    resolved_at: datetime | None = Field(default=None, sa_type=TZDateTime)


class AnalyticalReportTable(EntityTable, table=True):
    """Database persistence model for analytical reports."""

    __tablename__ = "analytical_reports"

    name: str
    report_type: AnalyticalReportType = Field(index=True)
    format: str = "JSON"
    status: JobStatus = JobStatus.PENDING
    data: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    filters: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    generated_by: str = Field(foreign_key="users.id")
    expires_at: datetime | None = Field(default=None, sa_type=TZDateTime, index=True)
    is_scheduled: bool = False
    next_run_at: datetime | None = Field(default=None, sa_type=TZDateTime)
