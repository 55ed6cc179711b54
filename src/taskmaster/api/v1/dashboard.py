"""Dashboard endpoint."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import CalendarRead, DashboardRead
from ...services import dashboard_service
from ...utils.datetime import utcnow

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardRead,
    summary="Business overview",
    responses={
        200: {
            "description": "Aggregated figures across all assignments",
            "content": {
                "application/json": {
                    "example": {
                        "total_pending": 2,
                        "total_overdue": 0,
                        "pending_amount": 18000.0,
                        "pending_writer_pay": 14000.0,
                        "active_dissertations": 1,
                        "due_today_amount": 0.0,
                        "status_distribution": {"In Progress": 2},
                        "upcoming": [],
                    }
                }
            },
        }
    },
)
def get_dashboard(db: Session = Depends(get_db)) -> DashboardRead:
    """Outstanding balances are summed without clamping overpayments."""

    return DashboardRead.model_validate(dashboard_service.build_dashboard(db), from_attributes=True)


@router.get("/calendar", response_model=CalendarRead, summary="Deadline calendar")
def get_calendar(
    year: Optional[int] = Query(None, ge=1, le=9998, description="Defaults to the current UTC year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Defaults to the current UTC month"),
    db: Session = Depends(get_db),
) -> CalendarRead:
    """Assignments not yet completed, grouped by the UTC day of their deadline."""

    today = utcnow()
    calendar = dashboard_service.build_calendar(db, year or today.year, month or today.month)
    return CalendarRead.model_validate(calendar, from_attributes=True)
