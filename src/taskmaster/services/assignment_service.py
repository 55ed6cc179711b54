"""Domain logic for assignment workflows."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Assignment, AssignmentPriority, AssignmentStatus, AssignmentType, Student
from ..utils.datetime import to_naive_utc, utcnow
from . import ledger, store

logger = logging.getLogger(__name__)

PRICING_INPUTS = ("word_count", "cost_per_word", "writer_cost_per_word")
NULLABLE_FIELDS = frozenset({"writer_id", "description", "document_link", "total_chapters", "chapters"})


class AssignmentRuleViolation(Exception):
    """Raised when assignment rules are violated."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def _ensure_assignment(session: Session, assignment_id: str) -> Assignment:
    assignment = store.get_record(session, "assignments", assignment_id)
    if assignment is None:
        raise AssignmentRuleViolation(f"Assignment {assignment_id} not found", status_code=404)
    return assignment


def _check_references(session: Session, student_id: Optional[str], writer_id: Optional[str]) -> None:
    if student_id and store.get_record(session, "students", student_id) is None:
        raise AssignmentRuleViolation(f"Student {student_id} not found", status_code=404)
    if writer_id and store.get_record(session, "writers", writer_id) is None:
        raise AssignmentRuleViolation(f"Writer {writer_id} not found", status_code=404)


def _chapters_as_dicts(chapters: Optional[Sequence[Any]]) -> Optional[list[dict]]:
    if chapters is None:
        return None
    return [dict(chapter) if isinstance(chapter, Mapping) else chapter.model_dump() for chapter in chapters]


def create_assignment(session: Session, fields: Mapping[str, Any]) -> Assignment:
    """Validate, derive prices and chapters, then persist a new assignment."""

    values = dict(fields)
    if not values.get("student_id") or not values.get("title"):
        raise AssignmentRuleViolation("Student and title are required.")
    values["writer_id"] = values.get("writer_id") or None
    _check_references(session, values["student_id"], values["writer_id"])

    values["deadline"] = to_naive_utc(values["deadline"])
    values.update(
        ledger.derive_prices(
            values.get("word_count"),
            values.get("cost_per_word"),
            values.get("writer_cost_per_word"),
        )
    )
    values["is_dissertation"] = AssignmentType(values.get("type", AssignmentType.ESSAY)) is AssignmentType.DISSERTATION
    values["chapters"] = _chapters_as_dicts(values.get("chapters"))
    if values["is_dissertation"] and not values["chapters"] and values.get("total_chapters"):
        values["chapters"] = ledger.build_chapters(values["total_chapters"])

    return store.create_record(session, "assignments", values)


def update_assignment(
    session: Session,
    assignment_id: str,
    fields: Mapping[str, Any],
) -> tuple[Assignment, Optional[str]]:
    """Apply a partial edit; returns the assignment and the writer to rate, if any."""

    assignment = _ensure_assignment(session, assignment_id)
    values = {key: value for key, value in fields.items() if value is not None or key in NULLABLE_FIELDS}

    if "student_id" in values and not values["student_id"]:
        raise AssignmentRuleViolation("Student and title are required.")
    if "title" in values and not values["title"]:
        raise AssignmentRuleViolation("Student and title are required.")
    if "writer_id" in values:
        values["writer_id"] = values["writer_id"] or None
    _check_references(session, values.get("student_id"), values.get("writer_id"))

    if values.get("deadline") is not None:
        values["deadline"] = to_naive_utc(values["deadline"])

    if any(key in values for key in PRICING_INPUTS):
        merged = {key: values.get(key, getattr(assignment, key)) for key in PRICING_INPUTS}
        values.update(ledger.derive_prices(**merged))

    new_type = AssignmentType(values.get("type") or assignment.type)
    values["is_dissertation"] = new_type is AssignmentType.DISSERTATION

    if "chapters" in values:
        values["chapters"] = _chapters_as_dicts(values["chapters"])
    elif values["is_dissertation"]:
        total = values.get("total_chapters", assignment.total_chapters)
        if total and (total != assignment.total_chapters or not assignment.chapters):
            values["chapters"] = ledger.build_chapters(total, assignment.chapters)

    prompt = None
    if values.get("status") is not None:
        target_writer = values.get("writer_id", assignment.writer_id)
        if ledger.rating_required(assignment.status, values["status"], target_writer):
            prompt = target_writer

    updated = store.update_record(session, "assignments", assignment.id, values)
    return updated, prompt


def get_assignment(session: Session, assignment_id: str) -> Assignment:
    return _ensure_assignment(session, assignment_id)


def change_status(
    session: Session,
    assignment_id: str,
    status: AssignmentStatus,
) -> tuple[Assignment, Optional[str]]:
    """Set any status; a first transition into Completed asks for a writer rating."""

    assignment = _ensure_assignment(session, assignment_id)
    prompt = assignment.writer_id if ledger.rating_required(assignment.status, status, assignment.writer_id) else None
    updated = store.update_record(session, "assignments", assignment.id, {"status": status})
    return updated, prompt


def move_status(session: Session, assignment_id: str, direction: str) -> tuple[Assignment, Optional[str]]:
    """Step forward or back along the board order."""

    assignment = _ensure_assignment(session, assignment_id)
    try:
        target = ledger.move_status(assignment.status, direction)
    except ledger.LedgerRuleViolation as exc:
        raise AssignmentRuleViolation(exc.detail, status_code=exc.status_code) from exc
    return change_status(session, assignment.id, target)


def settle_assignment(session: Session, assignment_id: str) -> Assignment:
    """Quick settle: the client has paid the full price."""

    assignment = _ensure_assignment(session, assignment_id)
    try:
        changes = ledger.settle_payment(assignment)
    except ledger.LedgerRuleViolation as exc:
        raise AssignmentRuleViolation(exc.detail, status_code=exc.status_code) from exc
    return store.update_record(session, "assignments", assignment.id, changes)


def reassign_writer(session: Session, assignment_id: str) -> Assignment:
    """Drop the current writer; money already paid to them becomes sunk cost."""

    assignment = _ensure_assignment(session, assignment_id)
    try:
        changes = ledger.reassign_writer(assignment)
    except ledger.LedgerRuleViolation as exc:
        raise AssignmentRuleViolation(exc.detail, status_code=exc.status_code) from exc
    logger.info(
        "writer %s unassigned from %s; %.2f moved to sunk costs",
        assignment.writer_id,
        assignment.id,
        assignment.writer_paid_amount or 0,
    )
    return store.update_record(session, "assignments", assignment.id, changes)


def update_chapter(
    session: Session,
    assignment_id: str,
    chapter_number: int,
    fields: Mapping[str, Any],
) -> Assignment:
    assignment = _ensure_assignment(session, assignment_id)
    chapters = [dict(chapter) for chapter in (assignment.chapters or [])]
    for chapter in chapters:
        if chapter.get("chapter_number") == chapter_number:
            chapter.update({key: value for key, value in fields.items() if value is not None})
            break
    else:
        raise AssignmentRuleViolation(f"Chapter {chapter_number} not found", status_code=404)
    return store.update_record(session, "assignments", assignment.id, {"chapters": chapters})


def delete_assignment(session: Session, assignment_id: str) -> None:
    assignment = _ensure_assignment(session, assignment_id)
    store.delete_record(session, "assignments", assignment.id)


def bulk_delete(session: Session, assignment_ids: Sequence[str]) -> dict:
    """Delete each id independently, committing one at a time.

    A failure leaves earlier deletions in place; the result lists the ids
    that could not be deleted.
    """

    unique_ids = list(dict.fromkeys(assignment_ids))
    deleted = 0
    failed: list[str] = []
    for assignment_id in unique_ids:
        try:
            delete_assignment(session, assignment_id)
            session.commit()
            deleted += 1
        except (AssignmentRuleViolation, SQLAlchemyError):
            session.rollback()
            logger.warning("bulk delete skipped assignment %s", assignment_id)
            failed.append(assignment_id)
    return {"attempted": len(unique_ids), "deleted": deleted, "failed": failed}


def list_assignments(
    session: Session,
    *,
    status: Optional[AssignmentStatus] = None,
    priority: Optional[AssignmentPriority] = None,
    search: Optional[str] = None,
    overdue_only: bool = False,
    now: Optional[datetime] = None,
) -> Sequence[Assignment]:
    """Assignments newest first with the list-view filters applied."""

    stmt = select(Assignment).order_by(Assignment.created_at.desc())
    if status is not None:
        stmt = stmt.where(Assignment.status == status)
    if priority is not None:
        stmt = stmt.where(Assignment.priority == priority)
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.join(Student, Student.id == Assignment.student_id, isouter=True).where(
            or_(
                func.lower(Assignment.title).like(pattern),
                func.lower(Assignment.subject).like(pattern),
                func.lower(func.coalesce(Student.name, "")).like(pattern),
            )
        )
    assignments = session.execute(stmt).scalars().all()

    if overdue_only:
        current = now or utcnow()
        assignments = [a for a in assignments if ledger.is_overdue(a.deadline, a.status, current)]
    return assignments
