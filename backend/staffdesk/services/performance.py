"""
Read-only performance figures for the current employee.

Recorded metrics come from the performance_metrics table; everything else is
derived from the caller's tasks. Percentages are whole numbers rounded half up.
"""

from collections import defaultdict
from datetime import datetime

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from staffdesk.models.performance import PerformanceMetric
from staffdesk.models.project import Project
from staffdesk.models.task import Task, TaskStatus
from staffdesk.schemas.common import Caller
from staffdesk.schemas.performance import MetricsQuery, PerformanceMetricOut, TrendQuery
from staffdesk.services.actions import server_action
from staffdesk.services.aggregates import count_if, percent, round_half_up
from staffdesk.services.dates import add_months

_DONE = TaskStatus.DONE.value


def _period(dt: datetime) -> str:
    return f"{dt.year:04d}-{dt.month:02d}"


@server_action("Failed to fetch performance metrics", schema=MetricsQuery)
def get_my_performance_metrics(db: Session, caller: Caller, payload: MetricsQuery):
    metrics = (
        db.query(PerformanceMetric)
        .filter(PerformanceMetric.user_id == caller.id)
        .order_by(PerformanceMetric.recorded_at.desc())
        .limit(payload.limit)
        .all()
    )
    return [PerformanceMetricOut.model_validate(m) for m in metrics]


@server_action("Failed to fetch task statistics")
def get_task_completion_stats(db: Session, caller: Caller):
    done = Task.status == _DONE
    on_time = and_(done, or_(Task.due_date.is_(None), Task.completed_at <= Task.due_date))

    total, completed, punctual = db.query(
        func.count(Task.id),
        count_if(done),
        count_if(on_time),
    ).filter(Task.assignee_id == caller.id).one()
    total, completed, punctual = int(total), int(completed), int(punctual)

    return {
        "totalTasks": total,
        "completedTasks": completed,
        "onTimeTasks": punctual,
        "completionRate": percent(completed, total),
        "onTimeRate": percent(punctual, completed),
    }


@server_action("Failed to fetch time accuracy")
def get_time_estimation_accuracy(db: Session, caller: Caller):
    """Compare estimated and actual hours over completed tasks that carry both.

    variance is the overrun in percent of the estimate (negative when under);
    accuracy is 100 minus its magnitude, floored at zero.
    """
    estimated, actual = db.query(
        func.coalesce(func.sum(Task.estimated_hours), 0),
        func.coalesce(func.sum(Task.actual_hours), 0),
    ).filter(
        Task.assignee_id == caller.id,
        Task.status == _DONE,
        Task.estimated_hours.isnot(None),
        Task.actual_hours.isnot(None),
    ).one()
    estimated, actual = float(estimated), float(actual)

    if estimated <= 0:
        variance, accuracy = 0.0, 0.0
    else:
        variance = round_half_up((actual - estimated) / estimated * 100, 1)
        accuracy = max(0.0, round_half_up(100 - abs(variance), 1))

    return {
        "totalEstimated": estimated,
        "totalActual": actual,
        "accuracy": accuracy,
        "variance": variance,
    }


@server_action("Failed to fetch performance trend", schema=TrendQuery)
def get_monthly_performance_trend(db: Session, caller: Caller, payload: TrendQuery):
    now = datetime.now()
    first_year, first_month = add_months(now.year, now.month, -(payload.months - 1))
    since = datetime(first_year, first_month, 1)

    buckets = {}
    for i in range(payload.months):
        y, m = add_months(first_year, first_month, i)
        buckets[f"{y:04d}-{m:02d}"] = {"count": 0, "hours": 0.0}

    tasks = db.query(Task).filter(
        Task.assignee_id == caller.id,
        Task.status == _DONE,
        Task.completed_at.isnot(None),
        Task.completed_at >= since,
    ).all()
    for t in tasks:
        bucket = buckets.get(_period(t.completed_at))
        if bucket is None:
            continue
        bucket["count"] += 1
        bucket["hours"] += t.actual_hours or 0

    return [
        {
            "period": period,
            "tasksCompleted": b["count"],
            "hoursLogged": round_half_up(b["hours"], 1),
            "averageTaskTime": round_half_up(b["hours"] / b["count"], 1) if b["count"] else 0,
        }
        for period, b in buckets.items()
    ]


@server_action("Failed to fetch project performance")
def get_project_performance(db: Session, caller: Caller):
    rows = (
        db.query(Task.project_id, Task.status, Task.actual_hours)
        .filter(Task.assignee_id == caller.id, Task.project_id.isnot(None))
        .all()
    )

    per_project = defaultdict(lambda: {"total": 0, "completed": 0, "hours": 0.0})
    for project_id, status, hours in rows:
        agg = per_project[project_id]
        agg["total"] += 1
        if status == _DONE:
            agg["completed"] += 1
        agg["hours"] += hours or 0

    if not per_project:
        return []

    names = dict(
        db.query(Project.id, Project.name).filter(Project.id.in_(list(per_project))).all()
    )
    result = [
        {
            "projectId": str(pid),
            "name": names.get(pid, "Unknown"),
            "totalTasks": agg["total"],
            "completedTasks": agg["completed"],
            "completionRate": percent(agg["completed"], agg["total"]),
            "hoursLogged": round_half_up(agg["hours"], 1),
        }
        for pid, agg in per_project.items()
    ]
    result.sort(key=lambda p: p["name"])
    return result
