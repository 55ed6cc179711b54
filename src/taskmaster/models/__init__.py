"""SQLAlchemy models for TaskMaster."""

from .assignment import (
    BOARD_SEQUENCE,
    CLOSED_STATUSES,
    Assignment,
    AssignmentPriority,
    AssignmentStatus,
    AssignmentType,
)
from .student import Student
from .user import User, UserSession
from .writer import Writer

__all__ = [
    "BOARD_SEQUENCE",
    "CLOSED_STATUSES",
    "Assignment",
    "AssignmentPriority",
    "AssignmentStatus",
    "AssignmentType",
    "Student",
    "User",
    "UserSession",
    "Writer",
]
