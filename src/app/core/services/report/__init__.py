from .analytics import REPORT_BUILDERS, ReportFilters
from .report_service import ReportService
from .scheduler import cleanup_loop, run_cleanup

__all__ = ["REPORT_BUILDERS", "ReportFilters", "ReportService", "cleanup_loop", "run_cleanup"]
