from pydantic import Field, field_validator
from typing import Literal, Optional
from datetime import datetime
from uuid import UUID

from staffdesk.schemas.common import CamelModel, ProjectRef

TaskStatusLiteral = Literal["TODO", "IN_PROGRESS", "IN_REVIEW", "BLOCKED", "DONE"]
TaskPriorityLiteral = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]
TaskFilterLiteral = Literal["all", "today", "week", "overdue", "blocked"]


class TaskCreate(CamelModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    priority: TaskPriorityLiteral = "MEDIUM"
    project_id: Optional[UUID] = Field(default=None, title="Project")
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @field_validator("estimated_hours")
    @classmethod
    def _estimate_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Estimated hours cannot be negative")
        return v or None


class TaskStatusUpdate(CamelModel):
    status: TaskStatusLiteral


class TaskHoursLog(CamelModel):
    hours: float

    @field_validator("hours")
    @classmethod
    def _hours_in_range(cls, v: float) -> float:
        if v <= 0 or v > 24:
            raise ValueError("Hours must be between 0 and 24")
        return v


class TaskFilter(CamelModel):
    filter: TaskFilterLiteral = "all"


class TaskOut(CamelModel):
    id: UUID
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    project_id: Optional[UUID] = None
    assignee_id: Optional[UUID] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    project: Optional[ProjectRef] = None
