"""Self-appraisal router."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import appraisals as svc

router = APIRouter(prefix="/api/v1/appraisals", tags=["Appraisals"])


@router.get("/")
def list_appraisals(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_my_appraisals(db, caller).to_json()


@router.get("/current")
def current_appraisal(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_current_appraisal(db, caller).to_json()


@router.get("/stats")
def appraisal_stats(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_appraisal_stats(db, caller).to_json()


@router.get("/{appraisal_id}")
def get_appraisal(
    appraisal_id: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_appraisal_by_id(db, caller, appraisal_id).to_json()


@router.put("/{appraisal_id}/self-review")
def update_self_review(
    appraisal_id: str,
    payload: dict = Body(default_factory=dict),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.update_self_review(db, caller, appraisal_id, payload).to_json()


@router.post("/{appraisal_id}/submit")
def submit_appraisal(
    appraisal_id: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.submit_appraisal(db, caller, appraisal_id).to_json()
