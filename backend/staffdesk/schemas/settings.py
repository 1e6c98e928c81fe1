from typing import Optional
from uuid import UUID

from staffdesk.schemas.common import CamelModel


class PreferencesUpdate(CamelModel):
    theme: Optional[str] = None
    language: Optional[str] = None
    timezone: Optional[str] = None


class NotificationSettingsUpdate(CamelModel):
    email_notifications: Optional[bool] = None
    project_updates: Optional[bool] = None
    team_activity: Optional[bool] = None
    login_alerts: Optional[bool] = None


class ProfileOut(CamelModel):
    id: UUID
    name: Optional[str] = None
    email: str
    role: str
