"""Assignment domain model."""

from __future__ import annotations

import enum
import uuid
from typing import Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Enum as SAEnum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class AssignmentStatus(str, enum.Enum):
    """Lifecycle states of a commissioned task."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    REVIEW = "Under Review"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    def next(self) -> Optional["AssignmentStatus"]:
        """Following state on the board, or None at the end or off the board."""

        if self not in BOARD_SEQUENCE:
            return None
        index = BOARD_SEQUENCE.index(self)
        if index + 1 >= len(BOARD_SEQUENCE):
            return None
        return BOARD_SEQUENCE[index + 1]

    def previous(self) -> Optional["AssignmentStatus"]:
        """Preceding state on the board, or None at the start or off the board."""

        if self not in BOARD_SEQUENCE:
            return None
        index = BOARD_SEQUENCE.index(self)
        if index == 0:
            return None
        return BOARD_SEQUENCE[index - 1]


BOARD_SEQUENCE = (
    AssignmentStatus.PENDING,
    AssignmentStatus.IN_PROGRESS,
    AssignmentStatus.REVIEW,
    AssignmentStatus.COMPLETED,
)

CLOSED_STATUSES = frozenset({AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED})


class AssignmentType(str, enum.Enum):
    ESSAY = "Essay"
    DISSERTATION = "Dissertation"
    REPORT = "Report"
    PRESENTATION = "Presentation"
    OTHER = "Other"


class AssignmentPriority(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Assignment(Base):
    """A commissioned piece of work with both sides of its money flow."""

    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint("price >= 0", name="assignments_price_positive"),
        CheckConstraint("paid_amount >= 0", name="assignments_paid_amount_positive"),
        CheckConstraint("sunk_costs >= 0", name="assignments_sunk_costs_positive"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id", ondelete="RESTRICT"), nullable=False)
    writer_id = Column(String(36), ForeignKey("writers.id", ondelete="SET NULL"))

    title = Column(String, nullable=False)
    type = Column(
        SAEnum(AssignmentType, name="assignment_type", values_callable=_enum_values),
        nullable=False,
        default=AssignmentType.ESSAY,
    )
    subject = Column(String, nullable=False, default="")
    level = Column(String, nullable=False, default="")
    priority = Column(
        SAEnum(AssignmentPriority, name="assignment_priority", values_callable=_enum_values),
        nullable=False,
        default=AssignmentPriority.MEDIUM,
    )
    status = Column(
        SAEnum(AssignmentStatus, name="assignment_status", values_callable=_enum_values),
        nullable=False,
        default=AssignmentStatus.PENDING,
    )
    deadline = Column(DateTime, nullable=False)
    description = Column(Text)
    document_link = Column(String)

    word_count = Column(Integer, nullable=False, default=0)
    cost_per_word = Column(Float, nullable=False, default=0)
    writer_cost_per_word = Column(Float, nullable=False, default=0)

    price = Column(Float, nullable=False, default=0)
    paid_amount = Column(Float, nullable=False, default=0)

    writer_price = Column(Float, nullable=False, default=0)
    writer_paid_amount = Column(Float, nullable=False, default=0)
    sunk_costs = Column(Float, nullable=False, default=0)

    is_dissertation = Column(Boolean, nullable=False, default=False)
    total_chapters = Column(Integer)
    chapters = Column(JSON)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    student = relationship("Student", back_populates="assignments")
    writer = relationship("Writer", back_populates="assignments")
