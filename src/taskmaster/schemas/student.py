"""Pydantic schemas for student endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StudentCreate(BaseModel):
    """Request body for creating a student."""

    name: str = Field(..., min_length=1)
    email: str
    phone: str = ""
    university: Optional[str] = None
    remarks: Optional[str] = None
    is_flagged: bool = Field(False, description="Non-payer or difficult client.")
    referred_by: Optional[str] = Field(None, description="Id of the student who referred this one.")


class StudentUpdate(BaseModel):
    """Partial update; only fields sent are changed."""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    university: Optional[str] = None
    remarks: Optional[str] = None
    is_flagged: Optional[bool] = None
    referred_by: Optional[str] = None


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str
    university: Optional[str]
    remarks: Optional[str]
    is_flagged: bool
    referred_by: Optional[str]
    created_at: datetime


class StudentSummary(BaseModel):
    """Account overview of one client, including their referral network."""

    student: StudentRead
    assignment_count: int
    total_projected: float
    total_paid: float
    total_due: float
    is_vip: bool
    referrer: Optional[StudentRead] = None
    referrals: List[StudentRead] = []
    network_revenue: float = 0
