"""
Identity provider.

Resolves the current request to a `Caller` or to None. It never raises: the
action handlers decide what an anonymous request gets ("Unauthorized").

Supports signed Bearer tokens (production) with an X-User-Id header fallback
when AUTH_MODE=demo.
"""

import uuid
from fastapi import Header, Depends
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk import config
from staffdesk.database import get_db
from staffdesk.models.user import User
from staffdesk.schemas.common import Caller
from staffdesk.services.auth import decode_access_token


def _as_uuid(value) -> Optional[uuid.UUID]:
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def resolve_caller(db: Session, user_id: Optional[uuid.UUID]) -> Optional[Caller]:
    if user_id is None:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if not user or user.is_active is False:
        return None
    return Caller(id=user.id, name=user.name, email=user.email, role=str(user.role))


def get_caller(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Optional[Caller]:
    """Bearer token first; in demo mode fall back to the X-User-Id header."""
    if authorization:
        token = authorization.removeprefix("Bearer ").strip()
        if token:
            return resolve_caller(db, decode_access_token(token))

    if config.AUTH_MODE == "demo":
        return resolve_caller(db, _as_uuid(x_user_id))

    return None
