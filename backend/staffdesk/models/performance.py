import uuid
from datetime import datetime

from sqlalchemy import Column, String, Float, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from staffdesk.database import Base
from staffdesk.models.project import Project


class PerformanceMetric(Base):
    __tablename__ = "performance_metrics"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    metric = Column(String(100), nullable=False)
    metric_type = Column(String(100), nullable=True)
    value = Column(Float, nullable=False)
    period = Column(String(50), nullable=False)
    recorded_at = Column(DateTime, default=datetime.now, nullable=False)

    project = relationship(Project, lazy="joined")
