"""Demo records for a fresh installation."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import AssignmentPriority, AssignmentStatus, AssignmentType, Student, User, Writer
from ..utils.datetime import utcnow
from . import assignment_service, auth_service, store

logger = logging.getLogger(__name__)


def _is_empty(session: Session, model) -> bool:
    return session.execute(select(func.count()).select_from(model)).scalar_one() == 0


def seed_demo_data(session: Session) -> dict[str, int]:
    """Populate empty collections with a small working example.

    Collections that already hold records are left alone.
    """

    summary = {"students": 0, "writers": 0, "users": 0, "assignments": 0}

    if _is_empty(session, Student):
        for fields in (
            {"name": "Alice Johnson", "email": "alice@uni.edu", "phone": "555-0101", "university": "Oxford"},
            {"name": "Bob Smith", "email": "bob@college.edu", "phone": "555-0102", "university": "Cambridge"},
        ):
            store.create_record(session, "students", fields)
            summary["students"] += 1

    if _is_empty(session, Writer):
        for fields in (
            {"name": "Dr. Expert", "contact": "919876543210", "specialty": "Law",
             "rating_quality": 4.8, "rating_punctuality": 5.0, "rating_count": 12},
            {"name": "Pro Writer", "contact": "919876543211", "specialty": "Nursing",
             "rating_quality": 4.2, "rating_punctuality": 3.8, "rating_count": 5},
        ):
            store.create_record(session, "writers", fields)
            summary["writers"] += 1

    if _is_empty(session, User):
        auth_service.create_user(session, username="admin", pin="0000", name="Administrator", email="admin@taskmaster.local")
        summary["users"] += 1

    students = store.list_records(session, "students")
    writers = store.list_records(session, "writers")
    if store.list_records(session, "assignments") or not students or not writers:
        logger.info("seed completed: %s", summary)
        return summary

    now = utcnow()
    assignment_service.create_assignment(
        session,
        {
            "student_id": students[-1].id,
            "writer_id": writers[-1].id,
            "title": "International Law Essay",
            "type": AssignmentType.ESSAY,
            "subject": "Law",
            "level": "Masters",
            "deadline": now + timedelta(days=3),
            "status": AssignmentStatus.IN_PROGRESS,
            "priority": AssignmentPriority.HIGH,
            "word_count": 2000,
            "cost_per_word": 2.5,
            "paid_amount": 2000,
            "writer_cost_per_word": 1.5,
            "writer_paid_amount": 1000,
        },
    )
    assignment_service.create_assignment(
        session,
        {
            "student_id": students[0].id,
            "title": "Nursing Dissertation",
            "type": AssignmentType.DISSERTATION,
            "subject": "Nursing",
            "level": "Undergraduate",
            "deadline": now + timedelta(days=30),
            "status": AssignmentStatus.IN_PROGRESS,
            "priority": AssignmentPriority.MEDIUM,
            "word_count": 10000,
            "cost_per_word": 2.0,
            "paid_amount": 5000,
            "writer_cost_per_word": 1.2,
            "total_chapters": 5,
        },
    )
    summary["assignments"] = 2
    logger.info("seed completed: %s", summary)
    return summary
