"""Dashboard response schemas."""

from datetime import date
from typing import Dict, List

from pydantic import BaseModel, Field

from .assignment import AssignmentRead, UpcomingAssignment


class DashboardRead(BaseModel):
    """Aggregated business figures across all assignments."""

    total_pending: int
    total_overdue: int
    pending_amount: float
    pending_writer_pay: float
    active_dissertations: int
    due_today_amount: float
    status_distribution: Dict[str, int]
    upcoming: List[UpcomingAssignment]


class CalendarDay(BaseModel):
    day: date
    assignments: List[AssignmentRead]


class CalendarRead(BaseModel):
    """Deadline calendar of one month; only days with deadlines are listed."""

    year: int
    month: int = Field(..., ge=1, le=12)
    days: List[CalendarDay] = []
