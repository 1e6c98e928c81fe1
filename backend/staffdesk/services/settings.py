"""Profile, preferences and notification settings for the signed-in user."""

import logging

from sqlalchemy.orm import Session

from staffdesk.models.user import DEFAULT_NOTIFICATION_SETTINGS, DEFAULT_PREFERENCES, User
from staffdesk.schemas.common import Caller
from staffdesk.schemas.settings import NotificationSettingsUpdate, PreferencesUpdate, ProfileOut
from staffdesk.services.actions import ActionResponse, NotFound, server_action

logger = logging.getLogger(__name__)


def _me(db: Session, caller: Caller) -> User:
    user = db.get(User, caller.id)
    if user is None:
        raise NotFound("User")
    return user


@server_action("Failed to fetch profile")
def get_profile(db: Session, caller: Caller):
    return ProfileOut.model_validate(_me(db, caller))


@server_action("Failed to fetch preferences")
def get_user_preferences(db: Session, caller: Caller):
    user = _me(db, caller)
    return {
        "preferences": {**DEFAULT_PREFERENCES, **(user.preferences or {})},
        "notificationSettings": {**DEFAULT_NOTIFICATION_SETTINGS, **(user.notification_settings or {})},
    }


@server_action("Failed to update preferences", schema=PreferencesUpdate, revalidate=("/settings", "/profile"))
def update_user_preferences(db: Session, caller: Caller, payload: PreferencesUpdate):
    user = _me(db, caller)
    # Blank values fall back to the defaults, they never leave a key unset
    prefs = {
        key: getattr(payload, key) or default
        for key, default in DEFAULT_PREFERENCES.items()
    }
    user.preferences = prefs
    db.commit()
    return ActionResponse.ok(prefs, message="Preferences updated successfully")


@server_action(
    "Failed to update notification settings",
    schema=NotificationSettingsUpdate,
    revalidate=("/settings",),
)
def update_notification_settings(db: Session, caller: Caller, payload: NotificationSettingsUpdate):
    user = _me(db, caller)
    supplied = payload.model_dump(by_alias=True)
    settings = {
        key: default if supplied.get(key) is None else supplied[key]
        for key, default in DEFAULT_NOTIFICATION_SETTINGS.items()
    }
    user.notification_settings = settings
    db.commit()
    return ActionResponse.ok(settings, message="Notification settings updated successfully")


@server_action("Failed to delete account")
def delete_user_account(db: Session, caller: Caller):
    user = _me(db, caller)
    user.is_active = False
    db.commit()
    logger.info("User %s deactivated their account", caller.id)
    return ActionResponse.ok(message="Account deleted successfully")
