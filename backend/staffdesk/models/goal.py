import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, CheckConstraint, Uuid

from staffdesk.database import Base


class GoalStatus(str, enum.Enum):
    active = "active"
    in_progress = "in-progress"
    completed = "completed"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    priority = Column(String(20), nullable=True)
    target_date = Column(DateTime, nullable=True)
    progress = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=GoalStatus.active.value)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_goal_progress_range"),
    )
