"""Entity package: Report and AnalyticalReport."""

from .entity import (
    AnalyticalReport,
    AnalyticalReportType,
    JobStatus,
    Report,
    ReportPriority,
    ReportSource,
    ReportStatus,
)
from .repository import AnalyticalReportRepository, ReportRepository
from .table import AnalyticalReportTable, ReportTable

__all__ = [
    "AnalyticalReport",
    "AnalyticalReportRepository",
    "AnalyticalReportTable",
    "AnalyticalReportType",
    "JobStatus",
    "Report",
    "ReportPriority",
    "ReportRepository",
    "ReportSource",
    "ReportStatus",
    "ReportTable",
]
