"""Performance dashboard router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import performance as svc

router = APIRouter(prefix="/api/v1/performance", tags=["Performance"])


@router.get("/metrics")
def metrics(
    limit: int = Query(50),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_my_performance_metrics(db, caller, {"limit": limit}).to_json()


@router.get("/tasks")
def task_completion(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_task_completion_stats(db, caller).to_json()


@router.get("/estimation")
def estimation_accuracy(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_time_estimation_accuracy(db, caller).to_json()


@router.get("/trend")
def monthly_trend(
    months: int = Query(6),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_monthly_performance_trend(db, caller, {"months": months}).to_json()


@router.get("/projects")
def project_performance(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_project_performance(db, caller).to_json()
