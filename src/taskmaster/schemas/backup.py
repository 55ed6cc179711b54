"""Backup file schemas.

Records use the camelCase field names of the JSON backup format; snake_case
names are accepted on input as well.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import AssignmentPriority, AssignmentStatus, AssignmentType

BACKUP_VERSION = "1.0"


class _BackupRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class StudentBackup(_BackupRecord):
    id: Optional[str] = None
    name: str
    email: str = ""
    phone: str = ""
    university: Optional[str] = None
    remarks: Optional[str] = None
    is_flagged: bool = False
    referred_by: Optional[str] = None
    created_at: Optional[datetime] = None


class WriterRatingBackup(_BackupRecord):
    quality: float = Field(0, ge=0, le=5)
    punctuality: float = Field(0, ge=0, le=5)
    count: int = Field(0, ge=0)


class WriterBackup(_BackupRecord):
    id: Optional[str] = None
    name: str
    contact: str = ""
    specialty: Optional[str] = None
    is_flagged: bool = False
    rating: Optional[WriterRatingBackup] = None
    created_at: Optional[datetime] = None


class ChapterBackup(_BackupRecord):
    chapter_number: int
    title: str
    is_completed: bool = False
    remarks: str = ""


class AssignmentBackup(_BackupRecord):
    id: Optional[str] = None
    student_id: str
    writer_id: Optional[str] = None
    title: str
    type: AssignmentType = AssignmentType.ESSAY
    subject: str = ""
    level: str = ""
    priority: AssignmentPriority = AssignmentPriority.MEDIUM
    status: AssignmentStatus = AssignmentStatus.PENDING
    deadline: datetime
    description: Optional[str] = None
    document_link: Optional[str] = None
    word_count: int = Field(0, ge=0)
    cost_per_word: float = Field(0, ge=0)
    writer_cost_per_word: float = Field(0, ge=0)
    price: float = Field(0, ge=0)
    paid_amount: float = Field(0, ge=0)
    writer_price: float = Field(0, ge=0)
    writer_paid_amount: float = Field(0, ge=0)
    sunk_costs: float = Field(0, ge=0)
    is_dissertation: bool = False
    total_chapters: Optional[int] = None
    chapters: Optional[List[ChapterBackup]] = None
    created_at: Optional[datetime] = None


class BackupPayload(BaseModel):
    """Whole-store snapshot; all three collections are required."""

    model_config = ConfigDict(extra="ignore")

    students: List[StudentBackup]
    writers: List[WriterBackup]
    assignments: List[AssignmentBackup]
    timestamp: Optional[str] = None
    version: str = BACKUP_VERSION


class RestoreReceipt(BaseModel):
    restored: bool
    replaced: bool = False
    students: int = 0
    writers: int = 0
    assignments: int = 0
