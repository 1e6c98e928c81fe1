"""Login and identity endpoints.

These sit outside the action envelope: a failed login is a plain 401 so that
HTTP clients and the docs UI treat it as an auth failure.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.models.user import User
from staffdesk.schemas.auth import LoginRequest, LoginResponse, UserOut
from staffdesk.schemas.common import Caller
from staffdesk.services.auth import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")

    logger.info("User %s logged in", user.id)
    return LoginResponse(
        access_token=create_access_token(user.id),
        user=UserOut(id=user.id, email=user.email, name=user.name, role=user.role),
    )


@router.get("/me", response_model=UserOut)
def me(caller: Optional[Caller] = Depends(get_caller)):
    if caller is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return UserOut(id=caller.id, email=caller.email, name=caller.name, role=caller.role)
