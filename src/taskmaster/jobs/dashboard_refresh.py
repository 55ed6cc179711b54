"""Background refresh of dashboard figures and deadline notifications."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from ..core.config import get_settings
from ..core.database import SessionLocal
from ..services import store
from ..services.dashboard_service import DeadlineNotifier, build_dashboard
from ..utils.datetime import utcnow

logger = logging.getLogger(__name__)

_scheduler = AsyncIOScheduler(timezone="UTC")


def run_refresh_once(
    notifier: DeadlineNotifier,
    current_time: Optional[datetime] = None,
    *,
    session_factory=SessionLocal,
) -> dict:
    """Re-read assignments, recompute the dashboard and send due notifications."""

    now = current_time or utcnow()
    session = session_factory()
    try:
        dashboard = build_dashboard(session, now=now)
        notified = notifier.dispatch(store.list_records(session, "assignments"), now)
        return {
            "total_pending": dashboard["total_pending"],
            "total_overdue": dashboard["total_overdue"],
            "notified": len(notified),
        }
    finally:
        session.close()


async def _execute_refresh(notifier: DeadlineNotifier) -> None:
    try:
        summary = run_refresh_once(notifier)
        logger.info("dashboard refresh completed: %s", summary)
    except Exception:  # pragma: no cover - safeguard for background job
        logger.exception("dashboard refresh job failed")
        raise


def register_scheduler(app: FastAPI) -> None:
    """Attach APScheduler lifecycle hooks to the FastAPI app."""

    settings = get_settings()
    notifier = DeadlineNotifier(window_hours=settings.notify_window_hours)
    app.state.deadline_notifier = notifier

    @app.on_event("startup")
    async def start_scheduler() -> None:
        if not _scheduler.running:
            _scheduler.add_job(
                _execute_refresh,
                "interval",
                seconds=settings.refresh_interval_seconds,
                args=[notifier],
                id="dashboard_refresh",
                replace_existing=True,
                misfire_grace_time=settings.refresh_interval_seconds,
            )
            _scheduler.start()
            logger.info("dashboard refresh scheduler started")

    @app.on_event("shutdown")
    async def shutdown_scheduler() -> None:
        if _scheduler.running:
            _scheduler.shutdown(wait=False)
            logger.info("dashboard refresh scheduler stopped")
