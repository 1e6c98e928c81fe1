from datetime import datetime, timedelta

import pytest

from staffdesk.models.performance import PerformanceMetric
from staffdesk.models.task import Task
from staffdesk.services.dates import add_months
from staffdesk.services.performance import (
    get_monthly_performance_trend,
    get_my_performance_metrics,
    get_project_performance,
    get_task_completion_stats,
    get_time_estimation_accuracy,
)


@pytest.fixture
def add_task(db, employee):
    def _add(status="TODO", due=None, completed=None, estimated=None, actual=None, project=None):
        t = Task(
            title="t",
            assignee_id=employee.id,
            status=status,
            due_date=due,
            completed_at=completed,
            estimated_hours=estimated,
            actual_hours=actual,
            project_id=project.id if project else None,
        )
        db.add(t)
        db.commit()
        return t
    return _add


def test_completion_stats(db, caller, add_task):
    now = datetime.now()
    add_task("DONE", due=now + timedelta(days=1), completed=now)       # on time
    add_task("DONE", due=now - timedelta(days=2), completed=now)       # late
    add_task("DONE", completed=now)                                    # no deadline
    add_task("IN_PROGRESS")

    assert get_task_completion_stats(db, caller).data == {
        "totalTasks": 4,
        "completedTasks": 3,
        "onTimeTasks": 2,
        "completionRate": 75,
        "onTimeRate": 67,
    }


def test_completion_stats_without_tasks(db, caller):
    data = get_task_completion_stats(db, caller).data
    assert data["completionRate"] == 0
    assert data["onTimeRate"] == 0


def test_estimation_accuracy(db, caller, add_task):
    now = datetime.now()
    add_task("DONE", completed=now, estimated=10, actual=12)
    add_task("DONE", completed=now, estimated=10, actual=10)
    add_task("DONE", completed=now, estimated=5)          # no actual, ignored
    add_task("TODO", estimated=3, actual=30)              # not done, ignored

    assert get_time_estimation_accuracy(db, caller).data == {
        "totalEstimated": 20.0,
        "totalActual": 22.0,
        "accuracy": 90.0,
        "variance": 10.0,
    }


def test_estimation_accuracy_empty(db, caller):
    data = get_time_estimation_accuracy(db, caller).data
    assert data["accuracy"] == 0
    assert data["variance"] == 0


def test_monthly_trend(db, caller, add_task):
    now = datetime.now()
    add_task("DONE", completed=now, actual=4)
    add_task("DONE", completed=now, actual=2)
    last_y, last_m = add_months(now.year, now.month, -1)
    add_task("DONE", completed=datetime(last_y, last_m, 15), actual=3)
    old_y, old_m = add_months(now.year, now.month, -7)
    add_task("DONE", completed=datetime(old_y, old_m, 15), actual=9)

    trend = get_monthly_performance_trend(db, caller, {"months": 6}).data
    assert len(trend) == 6
    assert trend[-1] == {
        "period": f"{now.year:04d}-{now.month:02d}",
        "tasksCompleted": 2,
        "hoursLogged": 6.0,
        "averageTaskTime": 3.0,
    }
    assert trend[-2]["period"] == f"{last_y:04d}-{last_m:02d}"
    assert trend[-2]["tasksCompleted"] == 1
    assert sum(p["tasksCompleted"] for p in trend) == 3


def test_monthly_trend_months_limit(db, caller):
    assert get_monthly_performance_trend(db, caller, {"months": 30}).success is False


def test_project_performance(db, caller, add_task, make_project):
    apollo = make_project("Apollo")
    zephyr = make_project("Zephyr")
    add_task("DONE", project=zephyr, actual=2)
    add_task("DONE", project=apollo, actual=1.5)
    add_task("TODO", project=apollo)
    add_task("DONE")

    rows = get_project_performance(db, caller).data
    assert [r["name"] for r in rows] == ["Apollo", "Zephyr"]
    assert rows[0] == {
        "projectId": str(apollo.id),
        "name": "Apollo",
        "totalTasks": 2,
        "completedTasks": 1,
        "completionRate": 50,
        "hoursLogged": 1.5,
    }


def test_recorded_metrics_newest_first(db, caller, employee, project):
    now = datetime.now()
    for i, name in enumerate(["velocity", "quality"]):
        db.add(PerformanceMetric(
            user_id=employee.id,
            project_id=project.id,
            metric=name,
            value=80 + i,
            period="2026-Q1",
            recorded_at=now - timedelta(days=10 - i),
        ))
    db.commit()

    body = get_my_performance_metrics(db, caller).to_json()
    assert [m["metric"] for m in body["data"]] == ["quality", "velocity"]
    assert body["data"][0]["project"]["name"] == project.name
    assert "recordedAt" in body["data"][0]
