"""Domain logic for writers and their ratings."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import CLOSED_STATUSES, Assignment, AssignmentStatus, Writer
from . import store
from .ledger import WriterRating, aggregate_rating, writer_due

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"specialty"})


class WriterRuleViolation(Exception):
    """Raised when writer rules are violated."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def _ensure_writer(session: Session, writer_id: str) -> Writer:
    writer = store.get_record(session, "writers", writer_id)
    if writer is None:
        raise WriterRuleViolation(f"Writer {writer_id} not found", status_code=404)
    return writer


def create_writer(session: Session, fields: Mapping[str, Any]) -> Writer:
    return store.create_record(session, "writers", fields)


def update_writer(session: Session, writer_id: str, fields: Mapping[str, Any]) -> Writer:
    writer = _ensure_writer(session, writer_id)
    values = {key: value for key, value in fields.items() if value is not None or key in NULLABLE_FIELDS}
    return store.update_record(session, "writers", writer.id, values)


def get_writer(session: Session, writer_id: str) -> Writer:
    return _ensure_writer(session, writer_id)


def _writer_assignments(session: Session, writer_ids: Sequence[str]) -> dict[str, list[Assignment]]:
    grouped: dict[str, list[Assignment]] = {writer_id: [] for writer_id in writer_ids}
    if not writer_ids:
        return grouped
    stmt = select(Assignment).where(Assignment.writer_id.in_(writer_ids))
    for assignment in session.execute(stmt).scalars():
        grouped[assignment.writer_id].append(assignment)
    return grouped


def _pending_pay(assignments: Sequence[Assignment]) -> float:
    return sum(writer_due(a) for a in assignments)


def _active_count(assignments: Sequence[Assignment]) -> int:
    return sum(1 for a in assignments if a.status is AssignmentStatus.IN_PROGRESS)


def list_writers(
    session: Session,
    *,
    search: Optional[str] = None,
    sort: str = "name",
) -> list[Writer]:
    """Writers matched on name, contact or specialty, in the requested order.

    ``name`` sorts ascending; every other key sorts highest first.
    """

    stmt = select(Writer)
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Writer.name).like(pattern),
                func.lower(Writer.contact).like(pattern),
                func.lower(func.coalesce(Writer.specialty, "")).like(pattern),
            )
        )
    writers = list(session.execute(stmt).scalars().all())

    if sort == "quality":
        writers.sort(key=lambda w: w.rating_quality or 0, reverse=True)
    elif sort == "punctuality":
        writers.sort(key=lambda w: w.rating_punctuality or 0, reverse=True)
    elif sort in ("pending", "active"):
        grouped = _writer_assignments(session, [w.id for w in writers])
        metric = _pending_pay if sort == "pending" else _active_count
        writers.sort(key=lambda w: metric(grouped[w.id]), reverse=True)
    else:
        writers.sort(key=lambda w: w.name.lower())
    return writers


def delete_writer(session: Session, writer_id: str) -> None:
    """Delete a writer according to the configured referential policy.

    ``restrict`` refuses while assignments reference the writer; ``cascade``
    and ``nullify`` leave those assignments unassigned.
    """

    writer = _ensure_writer(session, writer_id)
    assigned = session.execute(select(Assignment).where(Assignment.writer_id == writer.id)).scalars().all()
    if assigned:
        if get_settings().delete_policy == "restrict":
            raise WriterRuleViolation(
                f"Writer is assigned to {len(assigned)} assignment(s); reassign them first.",
                status_code=409,
            )
        for assignment in assigned:
            assignment.writer_id = None
        logger.info("unassigned writer %s from %d assignment(s)", writer.id, len(assigned))
    store.delete_record(session, "writers", writer.id)


def rate_writer(session: Session, writer_id: str, *, quality: int, punctuality: int) -> Writer:
    """Fold a rating into the writer's running average and persist it."""

    writer = _ensure_writer(session, writer_id)
    current = None
    if writer.rating_count:
        current = WriterRating(
            quality=writer.rating_quality or 0.0,
            punctuality=writer.rating_punctuality or 0.0,
            count=writer.rating_count,
        )
    rating = aggregate_rating(current, quality, punctuality)
    return store.update_record(
        session,
        "writers",
        writer.id,
        {
            "rating_quality": rating.quality,
            "rating_punctuality": rating.punctuality,
            "rating_count": rating.count,
        },
    )


def writer_summary(session: Session, writer_id: str) -> dict:
    """Workload counts and payables for one writer."""

    writer = _ensure_writer(session, writer_id)
    assignments = _writer_assignments(session, [writer.id])[writer.id]

    total_fee = sum(a.writer_price for a in assignments)
    total_paid = sum(a.writer_paid_amount for a in assignments)
    return {
        "writer": writer,
        "active": _active_count(assignments),
        "pending": sum(1 for a in assignments if a.status not in CLOSED_STATUSES),
        "completed": sum(1 for a in assignments if a.status is AssignmentStatus.COMPLETED),
        "total_fee": total_fee,
        "total_paid": total_paid,
        "pending_pay": total_fee - total_paid,
    }
