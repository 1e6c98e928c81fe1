"""Weekly timesheets router."""

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import timesheets as svc

router = APIRouter(prefix="/api/v1/timesheets", tags=["Timesheets"])


# ── Current week ──


@router.get("/current")
def current_timesheet(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_current_timesheet(db, caller).to_json()


@router.get("/history")
def timesheet_history(
    limit: int = Query(10),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_timesheet_history(db, caller, {"limit": limit}).to_json()


@router.get("/stats")
def timesheet_stats(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_timesheet_stats(db, caller).to_json()


@router.get("/projects")
def available_projects(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_available_projects(db, caller).to_json()


# ── Entries ──


@router.post("/entries")
def add_entry(
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.add_timesheet_entry(db, caller, payload).to_json()


@router.patch("/entries/{entry_id}")
def update_entry(
    entry_id: str,
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_timesheet_entry(db, caller, entry_id, payload).to_json()


@router.delete("/entries/{entry_id}")
def delete_entry(
    entry_id: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.delete_timesheet_entry(db, caller, entry_id).to_json()


# ── Submit ──


@router.post("/{timesheet_id}/submit")
def submit(
    timesheet_id: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.submit_timesheet(db, caller, timesheet_id).to_json()
