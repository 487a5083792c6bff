"""Report API router: customer/admin reports and analytical reports."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok, paginated
from src.app.core.models import PageParams
from src.app.core.services.report import ReportService
from src.app.entities.core.user import User
from src.app.entities.service.report import (
    AnalyticalReport,
    AnalyticalReportType,
    Report,
    ReportPriority,
    ReportStatus,
)

router = APIRouter(prefix="/reports", tags=["reports"])


class ReportCreate(BaseModel):
    type: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: ReportPriority = ReportPriority.MEDIUM
    target_type: str | None = None
    target_id: str | None = None
    attachments: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)


class ReportUpdate(BaseModel):
    status: ReportStatus | None = None
    priority: ReportPriority | None = None
    assignee_id: str | None = None
    resolution: str | None = None


class GenerateRequest(BaseModel):
    name: str = Field(min_length=1)
    report_type: AnalyticalReportType
    filters: dict[str, Any] = Field(default_factory=dict)
    expires_in_days: int | None = Field(default=None, gt=0)


class CleanupResult(BaseModel):
    removed: int


@router.post("", status_code=201, response_model=ApiResponse[Report])
def create_report(
    payload: ReportCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Report]:
    report = ReportService(session).create(user, payload.model_dump())
    session.commit()
    return ok(report, "Report submitted")


@router.get("", response_model=ApiResponse[list[Report]])
def list_reports(
    page: int = Query(1),
    limit: int = Query(10),
    status: ReportStatus | None = None,
    type: str | None = None,
    priority: ReportPriority | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Report]]:
    params = PageParams.of(page, limit)
    items, total = ReportService(session).list_reports(
        user, params, status=status, type=type, priority=priority
    )
    return paginated(items, total, params)


@router.get("/stats", response_model=ApiResponse[dict[str, Any]])
def report_stats(
    _: User = Depends(require_admin), session: Session = Depends(get_db_session)
) -> ApiResponse[dict[str, Any]]:
    return ok(ReportService(session).stats())


@router.post("/analytics", status_code=201, response_model=ApiResponse[AnalyticalReport])
def generate_report(
    payload: GenerateRequest,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[AnalyticalReport]:
    report = ReportService(session).generate(
        admin,
        payload.name,
        payload.report_type,
        payload.filters,
        payload.expires_in_days,
    )
    session.commit()
    return ok(report, "Report generated")


@router.get("/analytics", response_model=ApiResponse[list[AnalyticalReport]])
def list_analytical_reports(
    page: int = Query(1),
    limit: int = Query(10),
    report_type: AnalyticalReportType | None = None,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[AnalyticalReport]]:
    params = PageParams.of(page, limit)
    items, total = ReportService(session).list_analytical(params, report_type)
    return paginated(items, total, params)


@router.post("/analytics/cleanup", response_model=ApiResponse[CleanupResult])
def cleanup_analytical_reports(
    _: User = Depends(require_admin), session: Session = Depends(get_db_session)
) -> ApiResponse[CleanupResult]:
    removed = ReportService(session).cleanup_expired()
    session.commit()
    return ok(CleanupResult(removed=removed), "Expired reports removed")


@router.get("/analytics/{report_id}", response_model=ApiResponse[AnalyticalReport])
def get_analytical_report(
    report_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[AnalyticalReport]:
    return ok(ReportService(session).get_analytical(report_id))


@router.delete("/analytics/{report_id}", response_model=ApiResponse[None])
def delete_analytical_report(
    report_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    ReportService(session).delete_analytical(report_id)
    session.commit()
    return ok(message="Analytical report deleted")


@router.get("/{report_id}", response_model=ApiResponse[Report])
def get_report(
    report_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Report]:
    return ok(ReportService(session).get(user, report_id))


@router.patch("/{report_id}", response_model=ApiResponse[Report])
def update_report(
    report_id: str,
    payload: ReportUpdate,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Report]:
    report = ReportService(session).update(admin, report_id, **payload.model_dump())
    session.commit()
    return ok(report, "Report updated")


@router.delete("/{report_id}", response_model=ApiResponse[None])
def delete_report(
    report_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    ReportService(session).delete(report_id)
    session.commit()
    return ok(message="Report deleted")
