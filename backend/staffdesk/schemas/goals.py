from pydantic import Field, field_validator
from typing import Literal, Optional
from datetime import datetime
from uuid import UUID

from staffdesk.schemas.common import CamelModel

GoalStatusLiteral = Literal["active", "in-progress", "completed"]


def _require_title(v: str) -> str:
    if not v.strip():
        raise ValueError("Title is required")
    return v.strip()


class GoalCreate(CamelModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    target_date: Optional[datetime] = None
    category: Optional[str] = None
    priority: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        return _require_title(v)


class GoalUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    target_date: Optional[datetime] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    # Out-of-range progress is clamped by the handler, not rejected
    progress: Optional[float] = None
    status: Optional[GoalStatusLiteral] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _require_title(v)


class GoalProgressUpdate(CamelModel):
    progress: float


class GoalFilter(CamelModel):
    status: Optional[GoalStatusLiteral] = None
    category: Optional[str] = None


class GoalOut(CamelModel):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    target_date: Optional[datetime] = None
    progress: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
