from pydantic import Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from staffdesk.schemas.common import CamelModel


class SelfReviewUpdate(CamelModel):
    self_review: str = Field(title="Self-review")
    rating: Optional[int] = Field(default=None, ge=1, le=5, title="Rating")


class AppraisalCycleOut(CamelModel):
    id: UUID
    name: str
    start_date: datetime
    end_date: datetime
    status: str


class AppraisalOut(CamelModel):
    id: UUID
    cycle_id: UUID
    user_id: UUID
    self_review: Optional[str] = None
    manager_review: Optional[str] = None
    rating: Optional[int] = None
    final_rating: Optional[float] = None
    status: str
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cycle: Optional[AppraisalCycleOut] = None
