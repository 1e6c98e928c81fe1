"""
Personal calendar.

Events are not stored: each read merges three sources for the caller into
one list of `CalendarEvent`, sorted by date:

- tasks whose due date falls in the window
- appraisal reviews whose cycle ends in the window
- approved PTO overlapping the window, one event per day
"""

from datetime import datetime, timedelta

from sqlalchemy import and_
from sqlalchemy.orm import Session

from staffdesk.models.appraisal import AppraisalCycle, AppraisalReview
from staffdesk.models.pto import PTORequest
from staffdesk.models.task import Task, TaskStatus
from staffdesk.schemas.calendar import (
    CalendarDay,
    CalendarEvent,
    CalendarMonth,
    CalendarWindow,
    PTOOut,
)
from staffdesk.schemas.common import Caller
from staffdesk.services.actions import server_action
from staffdesk.services.aggregates import count_if
from staffdesk.services.dates import day_bounds, month_bounds, naive

DEFAULT_WINDOW = timedelta(days=30)
PTO_APPROVED = "APPROVED"


def expand_pto(pto: PTORequest, start: datetime, end: datetime) -> list[CalendarEvent]:
    """One event per calendar day of `pto`, keeping only days that touch [start, end]."""
    events = []
    day = pto.start_date.date()
    last = pto.end_date.date()
    while day <= last:
        day_start, day_end = day_bounds(day)
        if day_end >= start and day_start <= end:
            events.append(CalendarEvent(
                id=f"pto-{pto.id}-{day.isoformat()}",
                title=f"PTO: {pto.type}",
                type="pto",
                date=datetime.combine(day, pto.start_date.time()),
                status=pto.status,
                description=pto.reason or None,
            ))
        day += timedelta(days=1)
    return events


def collect_events(db: Session, caller: Caller, start: datetime, end: datetime) -> list[CalendarEvent]:
    tasks = db.query(Task).filter(
        Task.assignee_id == caller.id,
        Task.due_date.isnot(None),
        Task.due_date >= start,
        Task.due_date <= end,
    ).all()

    reviews = db.query(AppraisalReview).join(
        AppraisalCycle, AppraisalReview.cycle_id == AppraisalCycle.id
    ).filter(
        AppraisalReview.user_id == caller.id,
        AppraisalCycle.end_date >= start,
        AppraisalCycle.end_date <= end,
    ).all()

    # Compared by whole days so a PTO starting later on the window's first day still counts
    first_day, _ = day_bounds(start)
    _, last_day = day_bounds(end)
    ptos = db.query(PTORequest).filter(
        PTORequest.user_id == caller.id,
        PTORequest.status == PTO_APPROVED,
        PTORequest.start_date <= last_day,
        PTORequest.end_date >= first_day,
    ).all()

    events = [
        CalendarEvent(
            id=f"task-{t.id}",
            title=t.title,
            type="task",
            date=t.due_date,
            priority=t.priority or None,
            status=t.status or None,
            description=t.description or None,
        )
        for t in tasks
    ]
    events += [
        CalendarEvent(
            id=f"appraisal-{r.id}",
            title=f"Appraisal: {r.cycle.name}",
            type="appraisal",
            date=r.cycle.end_date,
            status=r.status,
        )
        for r in reviews
    ]
    for pto in ptos:
        events += expand_pto(pto, start, end)

    events.sort(key=lambda e: e.date)
    return events


@server_action("Failed to fetch calendar events", schema=CalendarWindow)
def get_my_calendar_events(db: Session, caller: Caller, payload: CalendarWindow):
    start = naive(payload.start_date) if payload.start_date else datetime.now()
    end = naive(payload.end_date) if payload.end_date else start + DEFAULT_WINDOW
    return collect_events(db, caller, start, end)


@server_action("Failed to fetch events for date", schema=CalendarDay)
def get_events_for_date(db: Session, caller: Caller, payload: CalendarDay):
    start, end = day_bounds(payload.date)
    return collect_events(db, caller, start, end)


@server_action("Failed to fetch upcoming events")
def get_upcoming_events(db: Session, caller: Caller):
    today, _ = day_bounds(datetime.now())
    _, week_end = day_bounds(today + timedelta(days=7))
    return collect_events(db, caller, today, week_end)


@server_action("Failed to fetch month events", schema=CalendarMonth)
def get_month_events(db: Session, caller: Caller, payload: CalendarMonth):
    start, end = month_bounds(payload.year, payload.month)
    return collect_events(db, caller, start, end)


@server_action("Failed to fetch calendar statistics")
def get_calendar_stats(db: Session, caller: Caller):
    today, today_end = day_bounds(datetime.now())
    next_week = today + timedelta(days=7)
    in_week = and_(Task.due_date >= today, Task.due_date <= next_week)

    today_tasks, week_tasks, upcoming = db.query(
        count_if(and_(Task.due_date >= today, Task.due_date <= today_end)),
        count_if(in_week),
        count_if(and_(in_week, Task.status != TaskStatus.DONE.value)),
    ).filter(Task.assignee_id == caller.id).one()
    return {
        "todayTasks": int(today_tasks),
        "weekTasks": int(week_tasks),
        "upcomingDeadlines": int(upcoming),
    }


@server_action("Failed to check PTO", schema=CalendarDay)
def check_pto_for_date(db: Session, caller: Caller, payload: CalendarDay):
    day_start, day_end = day_bounds(payload.date)
    pto = db.query(PTORequest).filter(
        PTORequest.user_id == caller.id,
        PTORequest.status == PTO_APPROVED,
        PTORequest.start_date <= day_end,
        PTORequest.end_date >= day_start,
    ).order_by(PTORequest.start_date.asc()).first()

    if pto is None:
        return {"hasPTO": False}
    return {"hasPTO": True, "pto": PTOOut.model_validate(pto)}
