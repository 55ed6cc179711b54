"""Writer (contractor) domain model."""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Writer(Base):
    """A contractor who performs assignments, with an aggregated rating."""

    __tablename__ = "writers"
    __table_args__ = (
        CheckConstraint("rating_count >= 0", name="writers_rating_count_positive"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    specialty = Column(String)
    is_flagged = Column(Boolean, nullable=False, default=False)
    rating_quality = Column(Float)
    rating_punctuality = Column(Float)
    rating_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    assignments = relationship("Assignment", back_populates="writer")

    @property
    def rating(self):
        """Aggregated rating, or None until the first rating is recorded."""

        if not self.rating_count:
            return None
        return {
            "quality": self.rating_quality,
            "punctuality": self.rating_punctuality,
            "count": self.rating_count,
        }
