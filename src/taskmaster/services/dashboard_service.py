"""Dashboard aggregation and deadline notifications."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import CLOSED_STATUSES, Assignment
from ..utils.datetime import hours_until, month_bounds, utcnow
from . import ledger, store

logger = logging.getLogger(__name__)


def build_dashboard(session: Session, *, now: Optional[datetime] = None) -> dict:
    """Read every assignment and aggregate the dashboard figures."""

    settings = get_settings()
    current = now or utcnow()
    assignments = store.list_records(session, "assignments")
    stats = ledger.compute_dashboard(assignments, current, upcoming_limit=settings.upcoming_limit)

    upcoming = [
        {
            "assignment": assignment,
            "deadline_state": ledger.classify_deadline(
                assignment.deadline,
                assignment.status,
                current,
                urgent_hours=settings.urgent_window_hours,
            ),
        }
        for assignment in stats.upcoming
    ]
    return {
        "total_pending": stats.total_pending,
        "total_overdue": stats.total_overdue,
        "pending_amount": stats.pending_amount,
        "pending_writer_pay": stats.pending_writer_pay,
        "active_dissertations": stats.active_dissertations,
        "due_today_amount": stats.due_today_amount,
        "status_distribution": stats.status_distribution,
        "upcoming": upcoming,
    }


def build_calendar(session: Session, year: int, month: int) -> dict:
    """Deadlines of one month grouped by UTC day; Completed work is left out."""

    start, end = month_bounds(year, month)
    stmt = select(Assignment).where(Assignment.deadline >= start, Assignment.deadline < end)
    grouped = ledger.group_by_deadline_day(session.execute(stmt).scalars().all())
    return {
        "year": year,
        "month": month,
        "days": [{"day": day, "assignments": items} for day, items in grouped.items()],
    }


class DeadlineNotifier:
    """Dispatches a deadline warning at most once per assignment.

    One instance spans one application session; the ids already notified
    are forgotten when the process restarts.
    """

    def __init__(self, *, window_hours: int = 24) -> None:
        self.window_hours = window_hours
        self._notified: set[str] = set()

    def pending(self, assignments: Iterable[Assignment], now: datetime) -> list[Assignment]:
        """Active assignments inside the window that were not notified yet."""

        return [
            assignment
            for assignment in assignments
            if assignment.status not in CLOSED_STATUSES
            and assignment.id not in self._notified
            and ledger.should_notify(assignment.deadline, now, window_hours=self.window_hours)
        ]

    def dispatch(self, assignments: Iterable[Assignment], now: datetime) -> list[str]:
        """Emit one warning per newly eligible assignment and remember it."""

        sent = []
        for assignment in self.pending(assignments, now):
            logger.warning(
                "deadline approaching: %s is due in %d hours",
                assignment.title,
                round(hours_until(assignment.deadline, now)),
            )
            self._notified.add(assignment.id)
            sent.append(assignment.id)
        return sent

    def reset(self) -> None:
        self._notified.clear()
