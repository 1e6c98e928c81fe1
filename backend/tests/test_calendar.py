import uuid
from datetime import datetime, timedelta

from staffdesk.models.appraisal import AppraisalReview
from staffdesk.models.pto import PTORequest
from staffdesk.models.task import Task
from staffdesk.services.calendar import (
    check_pto_for_date,
    expand_pto,
    get_calendar_stats,
    get_events_for_date,
    get_month_events,
    get_my_calendar_events,
    get_upcoming_events,
)

WINDOW_START = datetime(2026, 3, 1)
WINDOW_END = datetime(2026, 3, 31, 23, 59, 59)


def _task(db, user, title, due, status="TODO"):
    t = Task(title=title, assignee_id=user.id, due_date=due, status=status)
    db.add(t)
    db.commit()
    return t


def _pto(db, user, start, end, status="APPROVED", type="VACATION"):
    p = PTORequest(user_id=user.id, start_date=start, end_date=end, status=status, type=type)
    db.add(p)
    db.commit()
    return p


def _window(db, caller, start=WINDOW_START, end=WINDOW_END):
    res = get_my_calendar_events(db, caller, {"startDate": start.isoformat(), "endDate": end.isoformat()})
    assert res.success, res.error
    return res.data


def test_merges_sources_sorted_by_date(db, caller, employee, make_cycle):
    _task(db, employee, "Quarterly report", datetime(2026, 3, 20, 17))
    cycle = make_cycle(name="Spring", start=datetime(2026, 2, 1), end=datetime(2026, 3, 25))
    db.add(AppraisalReview(user_id=employee.id, cycle_id=cycle.id))
    db.commit()
    _pto(db, employee, datetime(2026, 3, 10, 9), datetime(2026, 3, 12, 17))

    events = _window(db, caller)

    assert [e.type for e in events] == ["pto", "pto", "pto", "task", "appraisal"]
    assert [e.date for e in events] == sorted(e.date for e in events)
    assert events[3].title == "Quarterly report"
    assert events[4].title == "Appraisal: Spring"
    assert all(e.title == "PTO: VACATION" for e in events[:3])
    assert len({e.id for e in events}) == 5


def test_only_approved_pto_and_own_records(db, caller, employee, make_user):
    stranger = make_user(name="Stranger")
    _pto(db, employee, datetime(2026, 3, 5), datetime(2026, 3, 5), status="PENDING")
    _pto(db, stranger, datetime(2026, 3, 5), datetime(2026, 3, 6))
    _task(db, stranger, "not mine", datetime(2026, 3, 5))
    assert _window(db, caller) == []


def test_pto_spanning_window_edge_is_clipped(db, caller, employee):
    _pto(db, employee, datetime(2026, 2, 26), datetime(2026, 3, 2))
    events = _window(db, caller)
    assert [e.date.day for e in events] == [1, 2]


def test_expand_pto_ids_are_per_day(employee):
    pid = uuid.uuid4()
    p = PTORequest(id=pid, user_id=employee.id, type="SICK", status="APPROVED",
                   start_date=datetime(2026, 3, 30), end_date=datetime(2026, 4, 2))
    events = expand_pto(p, datetime(2026, 3, 31), datetime(2026, 4, 30))
    assert [e.id for e in events] == [
        f"pto-{pid}-2026-03-31",
        f"pto-{pid}-2026-04-01",
        f"pto-{pid}-2026-04-02",
    ]
    assert all(e.type == "pto" for e in events)


def test_window_end_before_start_is_rejected(db, caller):
    res = get_my_calendar_events(db, caller, {"startDate": "2026-03-10T00:00:00", "endDate": "2026-03-01T00:00:00"})
    assert res.error == "End date must not be before start date"


def test_default_window_is_next_thirty_days(db, caller, employee):
    now = datetime.now()
    _task(db, employee, "soon", now + timedelta(days=3))
    _task(db, employee, "far", now + timedelta(days=45))
    _task(db, employee, "past", now - timedelta(days=3))
    assert [e.title for e in get_my_calendar_events(db, caller).data] == ["soon"]


def test_events_for_date(db, caller, employee):
    _task(db, employee, "on the day", datetime(2026, 3, 20, 23, 30))
    _task(db, employee, "next day", datetime(2026, 3, 21, 0, 0))
    events = get_events_for_date(db, caller, {"date": "2026-03-20"}).data
    assert [e.title for e in events] == ["on the day"]


def test_month_events_are_one_based(db, caller, employee):
    _task(db, employee, "feb", datetime(2026, 2, 28, 12))
    _task(db, employee, "march", datetime(2026, 3, 1, 0, 0))
    events = get_month_events(db, caller, {"year": 2026, "month": 3}).data
    assert [e.title for e in events] == ["march"]


def test_month_events_invalid_month(db, caller):
    assert get_month_events(db, caller, {"year": 2026, "month": 13}).success is False


def test_upcoming_events(db, caller, employee):
    now = datetime.now()
    _task(db, employee, "in five days", now + timedelta(days=5))
    _task(db, employee, "in ten days", now + timedelta(days=10))
    assert [e.title for e in get_upcoming_events(db, caller).data] == ["in five days"]


def test_calendar_stats(db, caller, employee):
    today_noon = datetime.now().replace(hour=12, minute=0, second=0, microsecond=0)
    _task(db, employee, "today", today_noon)
    _task(db, employee, "later this week", today_noon + timedelta(days=3))
    _task(db, employee, "done this week", today_noon + timedelta(days=2), status="DONE")
    _task(db, employee, "next month", today_noon + timedelta(days=40))

    assert get_calendar_stats(db, caller).data == {
        "todayTasks": 1,
        "weekTasks": 3,
        "upcomingDeadlines": 2,
    }


def test_check_pto_for_date(db, caller, employee):
    _pto(db, employee, datetime(2026, 3, 10, 9), datetime(2026, 3, 12, 17), type="SICK")

    hit = check_pto_for_date(db, caller, {"date": "2026-03-12"}).to_json()
    assert hit["data"]["hasPTO"] is True
    assert hit["data"]["pto"]["type"] == "SICK"

    miss = check_pto_for_date(db, caller, {"date": "2026-03-13"}).to_json()
    assert miss["data"] == {"hasPTO": False}
