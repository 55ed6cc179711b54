"""Pydantic schemas for assignment endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..models import AssignmentPriority, AssignmentStatus, AssignmentType
from ..services.ledger import chapter_progress as _chapter_progress


class ChapterProgress(BaseModel):
    chapter_number: int = Field(..., ge=1)
    title: str
    is_completed: bool = False
    remarks: str = ""


class ChapterUpdate(BaseModel):
    title: Optional[str] = None
    is_completed: Optional[bool] = None
    remarks: Optional[str] = None


class AssignmentCreate(BaseModel):
    """Request body for a new assignment.

    ``student_id`` and ``title`` are checked by the service so a missing
    value is reported as a rule violation rather than a schema error.
    """

    student_id: Optional[str] = None
    writer_id: Optional[str] = None
    title: Optional[str] = None
    type: AssignmentType = AssignmentType.ESSAY
    subject: str = ""
    level: str = ""
    priority: AssignmentPriority = AssignmentPriority.MEDIUM
    status: AssignmentStatus = AssignmentStatus.PENDING
    deadline: datetime
    description: Optional[str] = None
    document_link: Optional[str] = None

    word_count: int = Field(0, ge=0)
    cost_per_word: float = Field(0, ge=0, description="Client rate per word.")
    writer_cost_per_word: float = Field(0, ge=0, description="Writer rate per word.")

    price: float = Field(0, ge=0)
    paid_amount: float = Field(0, ge=0)
    writer_price: float = Field(0, ge=0)
    writer_paid_amount: float = Field(0, ge=0)
    sunk_costs: float = Field(0, ge=0)

    total_chapters: Optional[int] = Field(None, ge=1)
    chapters: Optional[List[ChapterProgress]] = None


class AssignmentUpdate(BaseModel):
    """Partial update; only fields sent are changed."""

    student_id: Optional[str] = None
    writer_id: Optional[str] = None
    title: Optional[str] = None
    type: Optional[AssignmentType] = None
    subject: Optional[str] = None
    level: Optional[str] = None
    priority: Optional[AssignmentPriority] = None
    status: Optional[AssignmentStatus] = None
    deadline: Optional[datetime] = None
    description: Optional[str] = None
    document_link: Optional[str] = None

    word_count: Optional[int] = Field(None, ge=0)
    cost_per_word: Optional[float] = Field(None, ge=0)
    writer_cost_per_word: Optional[float] = Field(None, ge=0)

    price: Optional[float] = Field(None, ge=0)
    paid_amount: Optional[float] = Field(None, ge=0)
    writer_price: Optional[float] = Field(None, ge=0)
    writer_paid_amount: Optional[float] = Field(None, ge=0)
    sunk_costs: Optional[float] = Field(None, ge=0)

    total_chapters: Optional[int] = Field(None, ge=1)
    chapters: Optional[List[ChapterProgress]] = None


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    writer_id: Optional[str]
    title: str
    type: AssignmentType
    subject: str
    level: str
    priority: AssignmentPriority
    status: AssignmentStatus
    deadline: datetime
    description: Optional[str]
    document_link: Optional[str]
    word_count: int
    cost_per_word: float
    writer_cost_per_word: float
    price: float
    paid_amount: float
    writer_price: float
    writer_paid_amount: float
    sunk_costs: float
    is_dissertation: bool
    total_chapters: Optional[int]
    chapters: Optional[List[ChapterProgress]]
    created_at: datetime

    @computed_field
    @property
    def due(self) -> float:
        return self.price - self.paid_amount

    @computed_field
    @property
    def writer_due(self) -> float:
        return self.writer_price - self.writer_paid_amount

    @computed_field
    @property
    def chapter_progress(self) -> int:
        """Percentage of completed dissertation chapters."""
        return _chapter_progress([chapter.model_dump() for chapter in self.chapters or []])


class StatusChange(BaseModel):
    status: AssignmentStatus


class StatusMove(BaseModel):
    direction: Literal["forward", "back"]


class StatusChangeResult(BaseModel):
    """Updated assignment plus the writer to rate, when a rating is due."""

    assignment: AssignmentRead
    rating_prompt: Optional[str] = Field(
        None,
        description="Writer id to rate; set only on the first transition into Completed.",
    )


class BulkDeleteRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)


class BulkDeleteResult(BaseModel):
    attempted: int
    deleted: int
    failed: List[str] = []


class DeadlineStateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_overdue: bool
    hours_left: int
    days_left: int
    is_urgent: bool
    label: str


class UpcomingAssignment(BaseModel):
    assignment: AssignmentRead
    deadline_state: DeadlineStateRead
