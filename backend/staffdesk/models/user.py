import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, JSON, Uuid

from staffdesk.database import Base


# ---------------------------------------------------
# Enums
# ---------------------------------------------------

USER_ROLE_ENUM = String(50)  # keep String to avoid enum migration issues

DEFAULT_PREFERENCES = {
    "theme": "light",
    "language": "English",
    "timezone": "UTC",
}

DEFAULT_NOTIFICATION_SETTINGS = {
    "emailNotifications": True,
    "projectUpdates": True,
    "teamActivity": True,
    "loginAlerts": True,
}


# ---------------------------------------------------
# User
# ---------------------------------------------------

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)

    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=True)
    password_hash = Column(String(255), nullable=False, default="")

    role = Column(USER_ROLE_ENUM, nullable=False, default="EMPLOYEE")
    is_active = Column(Boolean, default=True, nullable=False)

    # Settings page payloads, stored whole
    preferences = Column(JSON, nullable=True)
    notification_settings = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
