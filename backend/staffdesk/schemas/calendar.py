"""Calendar event schemas."""

from pydantic import Field, model_validator
import datetime as dt
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from staffdesk.schemas.common import CamelModel

CalendarEventType = Literal["task", "meeting", "deadline", "milestone", "appraisal", "pto"]


# ── Event ──


class CalendarEvent(CamelModel):
    id: str
    title: str
    type: CalendarEventType
    date: datetime
    time: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


# ── Queries ──


class CalendarWindow(CamelModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def _ordered(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class CalendarDay(CamelModel):
    date: dt.date = Field(title="Date")


class CalendarMonth(CamelModel):
    year: int = Field(ge=1970, le=9999, title="Year")
    month: int = Field(ge=1, le=12, title="Month")


class PTOOut(CamelModel):
    id: UUID
    type: str
    start_date: datetime
    end_date: datetime
    status: str
    reason: Optional[str] = None
