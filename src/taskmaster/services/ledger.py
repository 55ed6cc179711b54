"""Financial and lifecycle rules for assignments.

Everything here is synchronous and free of I/O: functions take entities (ORM
rows or any object exposing the same attributes) and return either derived
values or the field updates a caller should persist in one step.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from ..models import CLOSED_STATUSES, AssignmentStatus
from ..utils.datetime import ceil_days_until, ceil_hours_until, hours_until, to_naive_utc, utc_day

RATING_MIN = 1
RATING_MAX = 5


class LedgerRuleViolation(Exception):
    """Raised when a ledger operation is refused."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def _amount(value: Optional[float]) -> float:
    return float(value or 0)


def _status(value: Any) -> AssignmentStatus:
    return value if isinstance(value, AssignmentStatus) else AssignmentStatus(value)


# --- Price derivation -----------------------------------------------------


def derive_prices(
    word_count: Optional[int],
    cost_per_word: Optional[float],
    writer_cost_per_word: Optional[float],
) -> Dict[str, float]:
    """Return recommended prices for whichever rate pairs are complete.

    Missing or zero inputs produce no entry, so a manually entered price
    survives untouched.
    """

    updates: Dict[str, float] = {}
    if word_count and cost_per_word:
        updates["price"] = word_count * cost_per_word
    if word_count and writer_cost_per_word:
        updates["writer_price"] = word_count * writer_cost_per_word
    return updates


# --- Settlement and reassignment -----------------------------------------


def client_due(assignment) -> float:
    return _amount(assignment.price) - _amount(assignment.paid_amount)


def writer_due(assignment) -> float:
    return _amount(assignment.writer_price) - _amount(assignment.writer_paid_amount)


def settle_payment(assignment) -> Dict[str, float]:
    """Mark the client's outstanding balance as received."""

    if client_due(assignment) <= 0:
        raise LedgerRuleViolation("Nothing due on this assignment.")
    return {"paid_amount": _amount(assignment.price)}


def reassign_writer(assignment) -> Dict[str, Any]:
    """Unassign the current writer, moving what they were paid to sunk costs."""

    if not assignment.writer_id:
        raise LedgerRuleViolation("Assignment has no writer to unassign.")
    return {
        "sunk_costs": _amount(assignment.sunk_costs) + _amount(assignment.writer_paid_amount),
        "writer_id": None,
        "writer_paid_amount": 0.0,
        "writer_price": 0.0,
        "writer_cost_per_word": 0.0,
    }


# --- Ratings --------------------------------------------------------------


@dataclass(frozen=True)
class WriterRating:
    quality: float = 0.0
    punctuality: float = 0.0
    count: int = 0


def round1(value: float) -> float:
    """Round half-up to one decimal place."""

    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def aggregate_rating(current: Optional[WriterRating], quality: int, punctuality: int) -> WriterRating:
    """Fold one submitted rating into the running average."""

    for label, score in (("quality", quality), ("punctuality", punctuality)):
        if not RATING_MIN <= score <= RATING_MAX:
            raise LedgerRuleViolation(f"{label.capitalize()} must be between {RATING_MIN} and {RATING_MAX}.")

    current = current or WriterRating()
    count = current.count + 1
    return WriterRating(
        quality=round1((current.quality * current.count + quality) / count),
        punctuality=round1((current.punctuality * current.count + punctuality) / count),
        count=count,
    )


def rating_required(previous_status: Any, new_status: Any, writer_id: Optional[str]) -> bool:
    """True only on a transition into Completed for an assignment with a writer."""

    return (
        bool(writer_id)
        and _status(new_status) is AssignmentStatus.COMPLETED
        and _status(previous_status) is not AssignmentStatus.COMPLETED
    )


# --- Status ordering ------------------------------------------------------


def move_status(status: Any, direction: str) -> AssignmentStatus:
    """Step one place along the board; refuses at either end or off the board."""

    current = _status(status)
    if direction == "forward":
        target = current.next()
    elif direction == "back":
        target = current.previous()
    else:
        raise LedgerRuleViolation(f"Unknown direction '{direction}'.")
    if target is None:
        raise LedgerRuleViolation(f"Cannot move {direction} from {current.value}.")
    return target


# --- Dissertation chapters ------------------------------------------------


def build_chapters(total_chapters: Optional[int], existing: Optional[List[dict]] = None) -> Optional[List[dict]]:
    """Generate or resize the chapter list to ``total_chapters`` entries.

    Existing chapters keep their progress; growing appends ``Chapter N``
    placeholders and shrinking drops the trailing chapters.
    """

    if not total_chapters:
        return existing
    chapters = [dict(chapter) for chapter in (existing or [])][:total_chapters]
    for number in range(len(chapters) + 1, total_chapters + 1):
        chapters.append(
            {
                "chapter_number": number,
                "title": f"Chapter {number}",
                "is_completed": False,
                "remarks": "",
            }
        )
    return chapters


def chapter_progress(chapters: Optional[List[dict]]) -> int:
    """Percentage of completed chapters, rounded."""

    if not chapters:
        return 0
    done = sum(1 for chapter in chapters if chapter.get("is_completed"))
    return round(done / len(chapters) * 100)


# --- Deadlines ------------------------------------------------------------


@dataclass(frozen=True)
class DeadlineState:
    is_overdue: bool
    hours_left: int
    days_left: int
    is_urgent: bool
    label: str


def is_overdue(deadline: datetime, status: Any, now: datetime) -> bool:
    return to_naive_utc(deadline) < to_naive_utc(now) and _status(status) is not AssignmentStatus.COMPLETED


def classify_deadline(deadline: datetime, status: Any, now: datetime, *, urgent_hours: int = 6) -> DeadlineState:
    """Overdue/urgency view of one deadline at ``now``."""

    hours_left = ceil_hours_until(deadline, now)
    days_left = ceil_days_until(deadline, now)
    overdue = is_overdue(deadline, status, now)
    if overdue:
        label = "Overdue"
    elif hours_left <= 0:
        label = "Past"
    elif hours_left < 24:
        label = f"{hours_left}h"
    else:
        label = f"{days_left}d"
    return DeadlineState(
        is_overdue=overdue,
        hours_left=hours_left,
        days_left=days_left,
        is_urgent=0 < hours_left < urgent_hours,
        label=label,
    )


def should_notify(deadline: datetime, now: datetime, *, window_hours: int = 24) -> bool:
    return 0 < hours_until(deadline, now) < window_hours


# --- Dashboard ------------------------------------------------------------


@dataclass
class DashboardStats:
    total_pending: int = 0
    total_overdue: int = 0
    pending_amount: float = 0.0
    pending_writer_pay: float = 0.0
    active_dissertations: int = 0
    due_today_amount: float = 0.0
    status_distribution: Dict[str, int] = field(default_factory=dict)
    upcoming: List[Any] = field(default_factory=list)


def compute_dashboard(assignments: Iterable[Any], now: datetime, *, upcoming_limit: int = 5) -> DashboardStats:
    """Aggregate figures over every assignment.

    Outstanding sums are not clamped: an overpaid assignment lowers the total.
    """

    stats = DashboardStats()
    distribution: Counter = Counter()
    active = []
    today = utc_day(now)

    for assignment in assignments:
        status = _status(assignment.status)
        distribution[status.value] += 1
        if status not in CLOSED_STATUSES:
            stats.total_pending += 1
            active.append(assignment)
        if is_overdue(assignment.deadline, status, now):
            stats.total_overdue += 1
        stats.pending_amount += client_due(assignment)
        stats.pending_writer_pay += writer_due(assignment)
        if assignment.is_dissertation and status is not AssignmentStatus.COMPLETED:
            stats.active_dissertations += 1
        if utc_day(assignment.deadline) == today:
            stats.due_today_amount += client_due(assignment)

    stats.status_distribution = dict(distribution)
    stats.upcoming = sorted(active, key=lambda a: to_naive_utc(a.deadline))[:upcoming_limit]
    return stats


def group_by_deadline_day(assignments: Iterable[Any]) -> Dict[date, List[Any]]:
    """Calendar view: assignments not yet Completed, keyed by UTC deadline day.

    Days come out in order, and each day's assignments are ordered by deadline.
    """

    days: Dict[date, List[Any]] = {}
    for assignment in sorted(assignments, key=lambda a: to_naive_utc(a.deadline)):
        if _status(assignment.status) is AssignmentStatus.COMPLETED:
            continue
        days.setdefault(utc_day(assignment.deadline), []).append(assignment)
    return dict(sorted(days.items()))
