"""Personal goals router."""

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import goals as svc

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])


@router.get("/")
def list_goals(
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    if status or category:
        return svc.get_filtered_goals(db, caller, {"status": status, "category": category}).to_json()
    return svc.get_my_goals(db, caller).to_json()


@router.post("/")
def create_goal(
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.create_goal(db, caller, payload).to_json()


@router.get("/stats")
def goal_stats(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_goal_stats(db, caller).to_json()


@router.patch("/{goal_id}")
def update_goal(
    goal_id: str,
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_goal(db, caller, goal_id, payload).to_json()


@router.patch("/{goal_id}/progress")
def update_progress(
    goal_id: str,
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_goal_progress(db, caller, goal_id, payload).to_json()


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.delete_goal(db, caller, goal_id).to_json()
