"""Public schema exports."""

from .assignment import (
    AssignmentCreate,
    AssignmentRead,
    AssignmentUpdate,
    BulkDeleteRequest,
    BulkDeleteResult,
    ChapterProgress,
    ChapterUpdate,
    DeadlineStateRead,
    StatusChange,
    StatusChangeResult,
    StatusMove,
    UpcomingAssignment,
)
from .auth import LoginRequest, SessionRead, UserRead
from .backup import BackupPayload, RestoreReceipt
from .dashboard import CalendarDay, CalendarRead, DashboardRead
from .student import StudentCreate, StudentRead, StudentSummary, StudentUpdate
from .writer import RatingSubmit, WriterCreate, WriterRead, WriterSort, WriterSummary, WriterUpdate

__all__ = [
	"AssignmentCreate",
	"AssignmentRead",
	"AssignmentUpdate",
	"BackupPayload",
	"BulkDeleteRequest",
	"BulkDeleteResult",
	"ChapterProgress",
	"ChapterUpdate",
	"CalendarDay",
	"CalendarRead",
	"DashboardRead",
	"DeadlineStateRead",
	"LoginRequest",
	"RatingSubmit",
	"RestoreReceipt",
	"SessionRead",
	"StatusChange",
	"StatusChangeResult",
	"StatusMove",
	"StudentCreate",
	"StudentRead",
	"StudentSummary",
	"StudentUpdate",
	"UpcomingAssignment",
	"UserRead",
	"WriterCreate",
	"WriterRead",
	"WriterSort",
	"WriterSummary",
	"WriterUpdate",
]
