"""My-work tasks router."""

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import tasks as svc

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.get("/")
def list_tasks(
    filter: Optional[str] = Query(None),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    if filter:
        return svc.get_filtered_tasks(db, caller, {"filter": filter}).to_json()
    return svc.get_my_tasks(db, caller).to_json()


@router.post("/")
def create_task(
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.create_task(db, caller, payload).to_json()


@router.get("/stats")
def task_stats(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_my_task_stats(db, caller).to_json()


@router.patch("/{task_id}/status")
def update_status(
    task_id: str,
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_task_status(db, caller, task_id, payload).to_json()


@router.post("/{task_id}/hours")
def log_hours(
    task_id: str,
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.log_task_hours(db, caller, task_id, payload).to_json()
