"""Profile and settings router."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import settings as svc

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"])


@router.get("/profile")
def profile(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_profile(db, caller).to_json()


@router.get("/preferences")
def preferences(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_user_preferences(db, caller).to_json()


@router.put("/preferences")
def update_preferences(
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_user_preferences(db, caller, payload).to_json()


@router.put("/notifications")
def update_notifications(
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_notification_settings(db, caller, payload).to_json()


@router.delete("/account")
def delete_account(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.delete_user_account(db, caller).to_json()
