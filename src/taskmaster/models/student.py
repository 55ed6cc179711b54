"""Student (client) domain model."""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Student(Base):
    """A client who commissions assignments."""

    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("referred_by IS NULL OR referred_by <> id", name="students_no_self_referral"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False, default="")
    university = Column(String)
    remarks = Column(Text)
    is_flagged = Column(Boolean, nullable=False, default=False)
    referred_by = Column(String(36), ForeignKey("students.id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    assignments = relationship("Assignment", back_populates="student")
