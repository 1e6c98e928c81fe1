from pydantic import Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from staffdesk.schemas.common import CamelModel, ProjectRef


class MetricsQuery(CamelModel):
    limit: int = Field(default=50, ge=1, le=500)


class TrendQuery(CamelModel):
    months: int = Field(default=6, ge=1, le=24)


class PerformanceMetricOut(CamelModel):
    id: UUID
    metric: str
    metric_type: Optional[str] = None
    value: float
    period: str
    recorded_at: datetime
    project: Optional[ProjectRef] = None
