"""Unit tests for reports and generated analytical reports."""

from datetime import timedelta

import pytest

from src.app.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.app.core.models import PageParams
from src.app.core.services.database.db_session import DbSessionService
from src.app.core.services.report import ReportService
from src.app.core.services.report.scheduler import run_cleanup
from src.app.entities.core._base import utc_now
from src.app.entities.service.report import AnalyticalReportRepository
from src.app.entities.service.report.entity import (
    AnalyticalReport,
    AnalyticalReportType,
    JobStatus,
    ReportPriority,
    ReportSource,
    ReportStatus,
)

ISSUE = {"type": "PRODUCT_ISSUE", "title": "Broken zip", "description": "Zip broke on day one"}


class TestReports:
    def test_customer_report(self, session, user):
        report = ReportService(session).create(user, dict(ISSUE, priority=ReportPriority.HIGH))

        assert report.source == ReportSource.CUSTOMER
        assert report.status == ReportStatus.PENDING
        assert report.reporter_id == user.id

    def test_admin_report_source(self, session, admin):
        assert ReportService(session).create(admin, ISSUE).source == ReportSource.ADMIN

    def test_users_only_see_their_reports(self, session, user, admin, make_user):
        service = ReportService(session)
        mine = service.create(user, ISSUE)
        other = make_user(email="other@example.com")
        service.create(other, ISSUE)

        reports, total = service.list_reports(user, PageParams.of(1, 10))
        assert total == 1
        assert reports[0].id == mine.id
        assert service.list_reports(admin, PageParams.of(1, 10))[1] == 2

        with pytest.raises(PermissionDeniedError):
            service.get(other, mine.id)

    def test_resolve_sets_timestamp(self, session, user, admin):
        service = ReportService(session)
        report = service.create(user, ISSUE)

        updated = service.update(
            admin, report.id, status=ReportStatus.RESOLVED, resolution="Replaced"
        )

        assert updated.status == ReportStatus.RESOLVED
        assert updated.resolved_at is not None
        assert updated.resolution == "Replaced"

    def test_stats(self, session, user):
        service = ReportService(session)
        service.create(user, ISSUE)
        service.create(user, dict(ISSUE, type="SHIPPING", priority=ReportPriority.URGENT))

        stats = service.stats()

        assert stats["total"] == 2
        assert stats["by_type"] == {"PRODUCT_ISSUE": 1, "SHIPPING": 1}
        assert stats["by_priority"]["URGENT"] == 1

    def test_delete_unknown(self, session):
        with pytest.raises(NotFoundError):
            ReportService(session).delete("missing")


class TestAnalyticalReports:
    @pytest.mark.parametrize("report_type", list(AnalyticalReportType))
    def test_every_type_generates(self, session, user, admin, product, place_order, report_type):
        place_order(user, product)

        report = ReportService(session).generate(admin, "Weekly", report_type)

        assert report.status == JobStatus.COMPLETED
        assert report.data
        assert report.expires_at is not None

    def test_sales_figures(self, session, user, admin, product, place_order):
        place_order(user, product, quantity=2)

        data = ReportService(session).generate(admin, "Sales", AnalyticalReportType.SALES).data

        assert data["total_orders"] == 1
        assert data["total_revenue"] == 98.0
        assert data["top_products"][0]["quantity"] == 2
        assert data["sales_by_payment_method"]["COD"]["orders"] == 1

    def test_inventory_figures(self, session, admin, product):
        data = ReportService(session).generate(admin, "Stock", AnalyticalReportType.INVENTORY).data

        assert data["total_products"] == 1
        assert data["low_stock_count"] == 1
        assert data["inventory_value"] == 400.0

    def test_invalid_filters(self, session, admin):
        with pytest.raises(ValidationError, match="Invalid report filters") as exc_info:
            ReportService(session).generate(
                admin, "Bad", AnalyticalReportType.SALES, {"start_date": "not a date"}
            )
        assert exc_info.value.details["errors"][0]["loc"] == ("start_date",)

    def test_reversed_range(self, session, admin):
        with pytest.raises(ValidationError, match="Start date must be before end date"):
            ReportService(session).generate(
                admin,
                "Backwards",
                AnalyticalReportType.SALES,
                {"start_date": "2024-02-01T00:00:00Z", "end_date": "2024-01-01T00:00:00Z"},
            )

    def test_cleanup_removes_expired_only(self, session, admin):
        repository = AnalyticalReportRepository(session)
        repository.create(
            AnalyticalReport(
                name="Old",
                report_type=AnalyticalReportType.SALES,
                generated_by=admin.id,
                expires_at=utc_now() - timedelta(days=1),
            )
        )
        fresh = ReportService(session).generate(admin, "New", AnalyticalReportType.SALES)

        assert ReportService(session).cleanup_expired() == 1
        assert [r.id for r in repository.list_all()] == [fresh.id]

    def test_scheduled_cleanup_commits(self, engine, session, admin):
        AnalyticalReportRepository(session).create(
            AnalyticalReport(
                name="Old",
                report_type=AnalyticalReportType.INVENTORY,
                generated_by=admin.id,
                expires_at=utc_now() - timedelta(days=1),
            )
        )
        session.commit()

        assert run_cleanup(DbSessionService(engine=engine)) == 1
