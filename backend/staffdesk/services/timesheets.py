"""
Weekly timesheets and their entries.

A timesheet covers one Monday-aligned week per user and is created the first
time anything touches that week. `total_hours` is a stored aggregate: every
entry mutation recomputes it from the entries before committing.
"""

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from staffdesk.models.project import Project, ProjectStatus
from staffdesk.models.timesheet import Timesheet, TimesheetEntry, TimesheetStatus
from staffdesk.schemas.common import Caller
from staffdesk.schemas.timesheet import (
    ProjectOption,
    TimesheetEntryCreate,
    TimesheetEntryOut,
    TimesheetEntryUpdate,
    TimesheetHistoryQuery,
    TimesheetOut,
)
from staffdesk.services.actions import (
    ActionResponse,
    InvalidState,
    NotFound,
    ValidationFailed,
    find_owned,
    parse_id,
    server_action,
)
from staffdesk.services.aggregates import sum_if
from staffdesk.services.dates import naive, week_bounds

logger = logging.getLogger(__name__)

TIMESHEET_PATHS = ("/employee/timesheet",)

__all__ = [
    "week_bounds",
    "get_or_create_timesheet",
    "recompute_total_hours",
    "get_current_timesheet",
    "add_timesheet_entry",
    "update_timesheet_entry",
    "delete_timesheet_entry",
    "submit_timesheet",
    "get_timesheet_history",
    "get_timesheet_stats",
    "get_available_projects",
]


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────

def get_or_create_timesheet(db: Session, user_id, when: datetime) -> Timesheet:
    """Return the user's timesheet for the week containing `when`, creating it if needed.

    Creation is an insert guarded by the (user_id, week_start) unique
    constraint: if a concurrent request created the row first, the insert
    fails and the winner's row is returned instead of a duplicate.
    """
    week_start, week_end = week_bounds(when)

    def _lookup():
        return db.query(Timesheet).filter(
            Timesheet.user_id == user_id,
            Timesheet.week_start == week_start,
        ).first()

    timesheet = _lookup()
    if timesheet:
        return timesheet

    timesheet = Timesheet(
        user_id=user_id,
        week_start=week_start,
        week_end=week_end,
        total_hours=0,
        status=TimesheetStatus.DRAFT.value,
    )
    db.add(timesheet)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Timesheet for %s week %s created concurrently; reusing it", user_id, week_start.date())
        timesheet = _lookup()
        if timesheet is None:
            raise
    return timesheet


def recompute_total_hours(db: Session, timesheet: Timesheet) -> float:
    db.flush()
    total = db.query(
        func.coalesce(func.sum(TimesheetEntry.hours), 0)
    ).filter(TimesheetEntry.timesheet_id == timesheet.id).scalar()
    timesheet.total_hours = float(total)
    return timesheet.total_hours


def _owned_entry(db: Session, caller: Caller, entry_id) -> TimesheetEntry:
    eid = parse_id(entry_id, "Entry")
    entry = (
        db.query(TimesheetEntry)
        .join(Timesheet, TimesheetEntry.timesheet_id == Timesheet.id)
        .filter(TimesheetEntry.id == eid, Timesheet.user_id == caller.id)
        .first()
    )
    if entry is None:
        raise NotFound("Entry")
    return entry


# ──────────────────────────────────────────────
# Actions
# ──────────────────────────────────────────────

@server_action("Failed to fetch timesheet")
def get_current_timesheet(db: Session, caller: Caller):
    timesheet = get_or_create_timesheet(db, caller.id, datetime.now())
    db.refresh(timesheet)
    return TimesheetOut.model_validate(timesheet)


@server_action(
    "Failed to add timesheet entry",
    schema=TimesheetEntryCreate,
    revalidate=TIMESHEET_PATHS + ("/employee",),
)
def add_timesheet_entry(db: Session, caller: Caller, payload: TimesheetEntryCreate):
    if db.get(Project, payload.project_id) is None:
        raise ValidationFailed("Project not found")

    entry_date = naive(payload.date)
    timesheet = get_or_create_timesheet(db, caller.id, entry_date)
    if timesheet.status == TimesheetStatus.APPROVED.value:
        raise InvalidState("Cannot edit approved timesheet")

    entry = TimesheetEntry(
        timesheet_id=timesheet.id,
        date=entry_date,
        project_id=payload.project_id,
        hours=payload.hours,
        description=payload.description,
        billable=payload.billable,
    )
    db.add(entry)
    recompute_total_hours(db, timesheet)
    db.commit()
    db.refresh(entry)
    logger.info("Entry %s added to timesheet %s (total %.1fh)", entry.id, timesheet.id, timesheet.total_hours)
    return TimesheetEntryOut.model_validate(entry)


@server_action("Failed to update entry", schema=TimesheetEntryUpdate, revalidate=TIMESHEET_PATHS)
def update_timesheet_entry(db: Session, caller: Caller, entry_id, payload: TimesheetEntryUpdate):
    entry = _owned_entry(db, caller, entry_id)
    if entry.timesheet.status == TimesheetStatus.APPROVED.value:
        raise InvalidState("Cannot edit approved timesheet")

    for field, val in payload.model_dump(exclude_unset=True).items():
        if val is not None:
            setattr(entry, field, val)
    recompute_total_hours(db, entry.timesheet)
    db.commit()
    db.refresh(entry)
    return TimesheetEntryOut.model_validate(entry)


@server_action("Failed to delete entry", revalidate=TIMESHEET_PATHS)
def delete_timesheet_entry(db: Session, caller: Caller, entry_id):
    entry = _owned_entry(db, caller, entry_id)
    timesheet = entry.timesheet
    if timesheet.status == TimesheetStatus.APPROVED.value:
        raise InvalidState("Cannot delete from approved timesheet")

    db.delete(entry)
    recompute_total_hours(db, timesheet)
    db.commit()
    return ActionResponse.ok()


@server_action("Failed to submit timesheet", revalidate=TIMESHEET_PATHS)
def submit_timesheet(db: Session, caller: Caller, timesheet_id):
    timesheet = find_owned(db, Timesheet, timesheet_id, Timesheet.user_id, caller, "Timesheet")
    if timesheet.status != TimesheetStatus.DRAFT.value:
        raise InvalidState("Timesheet is not in draft status")

    timesheet.status = TimesheetStatus.SUBMITTED.value
    timesheet.submitted_at = datetime.now()
    db.commit()
    db.refresh(timesheet)
    return TimesheetOut.model_validate(timesheet)


@server_action("Failed to fetch timesheet history", schema=TimesheetHistoryQuery)
def get_timesheet_history(db: Session, caller: Caller, payload: TimesheetHistoryQuery):
    timesheets = (
        db.query(Timesheet)
        .filter(Timesheet.user_id == caller.id)
        .order_by(Timesheet.week_start.desc())
        .limit(payload.limit)
        .all()
    )
    return [TimesheetOut.model_validate(t) for t in timesheets]


@server_action("Failed to fetch statistics")
def get_timesheet_stats(db: Session, caller: Caller):
    month_start = datetime.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    total, billable = db.query(
        func.coalesce(func.sum(TimesheetEntry.hours), 0),
        sum_if(TimesheetEntry.billable.is_(True), TimesheetEntry.hours),
    ).join(
        Timesheet, TimesheetEntry.timesheet_id == Timesheet.id
    ).filter(
        Timesheet.user_id == caller.id,
        TimesheetEntry.date >= month_start,
    ).one()
    total, billable = float(total), float(billable)
    return {
        "totalHours": total,
        "billableHours": billable,
        "nonBillableHours": total - billable,
    }


@server_action("Failed to fetch projects")
def get_available_projects(db: Session, caller: Caller):
    projects = (
        db.query(Project)
        .filter(Project.status != ProjectStatus.COMPLETED.value)
        .order_by(Project.name.asc())
        .all()
    )
    return [ProjectOption.model_validate(p) for p in projects]
