"""Periodic removal of expired analytical reports."""

import asyncio

from loguru import logger

from src.app.core.services.database.db_session import DbSessionService
from src.app.core.services.report.report_service import ReportService


def run_cleanup(db_service: DbSessionService) -> int:
    with db_service.session_scope() as session:
        return ReportService(session).cleanup_expired()


async def cleanup_loop(db_service: DbSessionService, interval_seconds: int) -> None:
    """Run the cleanup every ``interval_seconds`` until cancelled."""
    logger.bind(interval_seconds=interval_seconds).info("report.scheduler_started")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(run_cleanup, db_service)
        except Exception:
            logger.exception("report.scheduled_cleanup_failed")
