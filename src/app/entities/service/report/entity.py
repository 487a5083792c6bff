"""Entities: Report (customer/admin tickets) and AnalyticalReport."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity, utc_now


class ReportSource(str, Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class ReportPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ReportStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class AnalyticalReportType(str, Enum):
    SALES = "SALES"
    INVENTORY = "INVENTORY"
    USER_ACTIVITY = "USER_ACTIVITY"
    FINANCIAL = "FINANCIAL"
    PERFORMANCE = "PERFORMANCE"
    CUSTOMER_BEHAVIOR = "CUSTOMER_BEHAVIOR"


class JobStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Report(Entity):
    """A problem report filed by a customer or by staff."""

    source: ReportSource = Field(default=ReportSource.CUSTOMER)
    reporter_id: str = Field(description="User who filed the report")
    assignee_id: str | None = Field(default=None, description="Admin handling it")
    type: str = Field(min_length=1, description="Free-form category, e.g. PRODUCT_ISSUE")
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: ReportPriority = Field(default=ReportPriority.MEDIUM)
    status: ReportStatus = Field(default=ReportStatus.PENDING)
    target_type: str | None = Field(default=None)
    target_id: str | None = Field(default=None)
    attachments: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)
    resolution: str | None = Field(default=None)
    resolved_at: datetime | None = Field(default=None)

    def set_status(self, status: ReportStatus) -> None:
        self.status = status
        if status == ReportStatus.RESOLVED:
            self.resolved_at = utc_now()


class AnalyticalReport(Entity):
    """A generated snapshot of store aggregates."""

    name: str = Field(min_length=1)
    report_type: AnalyticalReportType
    format: str = Field(default="JSON")
    status: JobStatus = Field(default=JobStatus.PENDING)
    data: dict[str, Any] = Field(default_factory=dict)
    filters: dict[str, Any] = Field(default_factory=dict)
    generated_by: str = Field(description="Admin who requested it")
    expires_at: datetime | None = Field(default=None)
    is_scheduled: bool = False
    next_run_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at is not None and self.expires_at < (now or utc_now())
