import uuid
from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid

from staffdesk.database import Base


class PTORequest(Base):
    """Paid time off. Read-only for employee actions (consumed by the calendar)."""

    __tablename__ = "pto_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(30), nullable=False, default="VACATION")
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default="PENDING")
    reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
