from pydantic import AfterValidator, Field
from typing import Annotated, Optional
from datetime import datetime
from uuid import UUID

from staffdesk.schemas.common import CamelModel, ProjectRef


def _check_hours(v: float) -> float:
    if v <= 0 or v > 24:
        raise ValueError("Hours must be between 0 and 24")
    return v


Hours = Annotated[float, AfterValidator(_check_hours)]


class TimesheetEntryCreate(CamelModel):
    date: datetime = Field(title="Date")
    project_id: UUID = Field(title="Project")
    hours: Hours = Field(title="Hours")
    description: Optional[str] = None
    billable: bool = False


class TimesheetEntryUpdate(CamelModel):
    hours: Optional[Hours] = None
    description: Optional[str] = None
    billable: Optional[bool] = None


class TimesheetHistoryQuery(CamelModel):
    limit: int = Field(default=10, ge=1, le=100)


class TimesheetEntryOut(CamelModel):
    id: UUID
    timesheet_id: UUID
    date: datetime
    project_id: Optional[UUID] = None
    hours: float
    description: Optional[str] = None
    billable: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    project: Optional[ProjectRef] = None


class ApproverRef(CamelModel):
    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None


class TimesheetOut(CamelModel):
    id: UUID
    user_id: UUID
    week_start: datetime
    week_end: datetime
    total_hours: float
    status: str
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    entries: list[TimesheetEntryOut] = []
    approver: Optional[ApproverRef] = None


class ProjectOption(CamelModel):
    id: UUID
    name: str
    status: str
