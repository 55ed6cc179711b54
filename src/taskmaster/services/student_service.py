"""Domain logic for students (clients)."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import Assignment, Student
from . import store
from .ledger import client_due

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"university", "remarks", "referred_by"})


class StudentRuleViolation(Exception):
    """Raised when student rules are violated."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def _ensure_student(session: Session, student_id: str) -> Student:
    student = store.get_record(session, "students", student_id)
    if student is None:
        raise StudentRuleViolation(f"Student {student_id} not found", status_code=404)
    return student


def _check_referral(session: Session, student_id: Optional[str], referred_by: Optional[str]) -> None:
    if not referred_by:
        return
    if student_id is not None and referred_by == student_id:
        raise StudentRuleViolation("A student cannot refer themselves.")
    if store.get_record(session, "students", referred_by) is None:
        raise StudentRuleViolation(f"Referring student {referred_by} not found")


def create_student(session: Session, fields: Mapping[str, Any]) -> Student:
    """Persist a new student after checking the referral."""

    values = dict(fields)
    values["referred_by"] = values.get("referred_by") or None
    _check_referral(session, None, values["referred_by"])
    return store.create_record(session, "students", values)


def update_student(session: Session, student_id: str, fields: Mapping[str, Any]) -> Student:
    student = _ensure_student(session, student_id)
    values = {key: value for key, value in fields.items() if value is not None or key in NULLABLE_FIELDS}
    if "referred_by" in values:
        values["referred_by"] = values["referred_by"] or None
        _check_referral(session, student.id, values["referred_by"])
    return store.update_record(session, "students", student.id, values)


def get_student(session: Session, student_id: str) -> Student:
    return _ensure_student(session, student_id)


def list_students(session: Session, *, search: Optional[str] = None) -> Sequence[Student]:
    """Students newest first, optionally matched on name, university or email."""

    stmt = select(Student).order_by(Student.created_at.desc())
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Student.name).like(pattern),
                func.lower(func.coalesce(Student.university, "")).like(pattern),
                func.lower(Student.email).like(pattern),
            )
        )
    return session.execute(stmt).scalars().all()


def list_student_assignments(session: Session, student_id: str) -> Sequence[Assignment]:
    _ensure_student(session, student_id)
    stmt = (
        select(Assignment)
        .where(Assignment.student_id == student_id)
        .order_by(Assignment.created_at.desc())
    )
    return session.execute(stmt).scalars().all()


def delete_student(session: Session, student_id: str) -> None:
    """Delete a student according to the configured referential policy.

    ``restrict`` and ``nullify`` refuse while assignments reference the
    student, since an assignment cannot exist without one; ``cascade``
    removes those assignments too. Referrals made by the student are cleared.
    """

    student = _ensure_student(session, student_id)
    policy = get_settings().delete_policy

    owned = session.execute(select(Assignment).where(Assignment.student_id == student.id)).scalars().all()
    if owned:
        if policy != "cascade":
            raise StudentRuleViolation(
                f"Student has {len(owned)} assignment(s); delete or move them first.",
                status_code=409,
            )
        for assignment in owned:
            session.delete(assignment)
        logger.info("cascade deleted %d assignment(s) of student %s", len(owned), student.id)

    session.execute(update(Student).where(Student.referred_by == student.id).values(referred_by=None))
    store.delete_record(session, "students", student.id)


def student_summary(session: Session, student_id: str) -> dict:
    """Totals, VIP status and referral network of one student."""

    student = _ensure_student(session, student_id)
    assignments = list_student_assignments(session, student.id)

    total_projected = sum(a.price for a in assignments)
    total_paid = sum(a.paid_amount for a in assignments)

    referrer = store.get_record(session, "students", student.referred_by) if student.referred_by else None
    referrals = session.execute(
        select(Student).where(Student.referred_by == student.id).order_by(Student.created_at.desc())
    ).scalars().all()

    network_revenue = 0.0
    if referrals:
        network_revenue = session.execute(
            select(func.coalesce(func.sum(Assignment.price), 0)).where(
                Assignment.student_id.in_([r.id for r in referrals])
            )
        ).scalar_one()

    return {
        "student": student,
        "assignment_count": len(assignments),
        "total_projected": total_projected,
        "total_paid": total_paid,
        "total_due": sum(client_due(a) for a in assignments),
        "is_vip": total_projected > get_settings().vip_threshold,
        "referrer": referrer,
        "referrals": referrals,
        "network_revenue": float(network_revenue),
    }
