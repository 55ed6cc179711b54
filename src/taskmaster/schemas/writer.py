"""Pydantic schemas for writer endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

WriterSort = Literal["name", "quality", "punctuality", "pending", "active"]


class WriterRatingRead(BaseModel):
    quality: float = Field(..., ge=0, le=5)
    punctuality: float = Field(..., ge=0, le=5)
    count: int = Field(..., ge=0)


class WriterCreate(BaseModel):
    """Request body for registering a writer."""

    name: str = Field(..., min_length=1)
    contact: str = Field(..., description="Phone number or other contact channel.")
    specialty: Optional[str] = None
    is_flagged: bool = Field(False, description="Ghosted or delivered poor work.")


class WriterUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = None
    specialty: Optional[str] = None
    is_flagged: Optional[bool] = None


class WriterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    contact: str
    specialty: Optional[str]
    is_flagged: bool
    rating: Optional[WriterRatingRead]
    created_at: datetime


class RatingSubmit(BaseModel):
    """Scores given when an assignment is completed."""

    quality: int = Field(..., ge=1, le=5)
    punctuality: int = Field(..., ge=1, le=5)


class WriterSummary(BaseModel):
    """Workload and payables of one writer."""

    writer: WriterRead
    active: int = Field(..., ge=0, description="Assignments in progress.")
    pending: int = Field(..., ge=0, description="Assignments not yet completed or cancelled.")
    completed: int = Field(..., ge=0)
    total_fee: float
    total_paid: float
    pending_pay: float
