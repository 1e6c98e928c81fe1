import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Text, Integer, Float, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship

from staffdesk.database import Base


class AppraisalStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class AppraisalCycle(Base):
    """Review period, managed outside the employee actions."""

    __tablename__ = "appraisal_cycles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default=AppraisalStatus.DRAFT.value)

    created_at = Column(DateTime, default=datetime.now, nullable=False)


class AppraisalReview(Base):
    __tablename__ = "appraisal_reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cycle_id = Column(Uuid, ForeignKey("appraisal_cycles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    self_review = Column(Text, nullable=True)
    manager_review = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    final_rating = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default=AppraisalStatus.DRAFT.value)
    submitted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    cycle = relationship(AppraisalCycle, lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "cycle_id", name="uq_appraisal_user_cycle"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_appraisal_rating_range"),
    )
