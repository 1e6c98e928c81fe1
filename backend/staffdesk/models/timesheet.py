import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Text, Float, Boolean, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship

from staffdesk.database import Base
from staffdesk.models.project import Project
from staffdesk.models.user import User


class TimesheetStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"


class TimesheetEntry(Base):
    __tablename__ = "timesheet_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    timesheet_id = Column(Uuid, ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(DateTime, nullable=False)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    hours = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    billable = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    project = relationship(Project, lazy="joined")
    timesheet = relationship("Timesheet", back_populates="entries")

    __table_args__ = (
        CheckConstraint("hours > 0 AND hours <= 24", name="ck_ts_entry_hours_range"),
    )


class Timesheet(Base):
    __tablename__ = "timesheets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    week_start = Column(DateTime, nullable=False)
    week_end = Column(DateTime, nullable=False)
    total_hours = Column(Float, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=TimesheetStatus.DRAFT.value)
    submitted_at = Column(DateTime, nullable=True)
    approved_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    entries = relationship(
        TimesheetEntry,
        back_populates="timesheet",
        cascade="all, delete-orphan",
        order_by=TimesheetEntry.date,
    )
    approver = relationship(User, foreign_keys=[approved_by])

    # One timesheet per user per week; lazy creation relies on it
    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_timesheet_user_week"),
    )
