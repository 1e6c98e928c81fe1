"""Personal calendar router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from staffdesk.database import get_db
from staffdesk.dependencies import get_caller
from staffdesk.schemas.common import Caller
from staffdesk.services import calendar as svc

router = APIRouter(prefix="/api/v1/calendar", tags=["Calendar"])


@router.get("/events")
def list_events(
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_my_calendar_events(db, caller, {"startDate": start, "endDate": end}).to_json()


@router.get("/events/day/{day}")
def events_for_date(
    day: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_events_for_date(db, caller, {"date": day}).to_json()


@router.get("/events/upcoming")
def upcoming_events(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_upcoming_events(db, caller).to_json()


@router.get("/events/month/{year}/{month}")
def month_events(
    year: str,
    month: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_month_events(db, caller, {"year": year, "month": month}).to_json()


@router.get("/stats")
def calendar_stats(
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.get_calendar_stats(db, caller).to_json()


@router.get("/pto/{day}")
def pto_for_date(
    day: str,
    caller: Optional[Caller] = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return svc.check_pto_for_date(db, caller, {"date": day}).to_json()
