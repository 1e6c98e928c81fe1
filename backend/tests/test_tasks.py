from datetime import datetime, timedelta

from staffdesk.models.task import Task
from staffdesk.services import revalidation
from staffdesk.services.tasks import (
    create_task,
    get_filtered_tasks,
    get_my_task_stats,
    get_my_tasks,
    log_task_hours,
    update_task_status,
)


def _new_task(db, caller, **payload):
    payload.setdefault("title", "Write report")
    res = create_task(db, caller, payload)
    assert res.success, res.error
    return res.data


def test_create_task_defaults(db, caller):
    task = _new_task(db, caller)
    assert task.status == "TODO"
    assert task.priority == "MEDIUM"
    assert task.assignee_id == caller.id
    assert revalidation.path_version("/employee/my-work") == 1
    assert revalidation.path_version("/employee") == 1


def test_create_task_requires_title(db, caller):
    res = create_task(db, caller, {"title": "   "})
    assert res.success is False
    assert res.error == "Title is required"
    assert db.query(Task).count() == 0


def test_create_task_unauthorized_writes_nothing(db):
    res = create_task(db, None, {"title": "Sneaky"})
    assert res.to_json() == {"success": False, "error": "Unauthorized"}
    assert db.query(Task).count() == 0
    assert revalidation.stale_paths() == []


def test_create_task_unknown_project(db, caller):
    import uuid
    res = create_task(db, caller, {"title": "x", "projectId": str(uuid.uuid4())})
    assert res.error == "Project not found"


def test_task_with_project_serializes_project_ref(db, caller, project):
    _new_task(db, caller, projectId=str(project.id))
    body = get_my_tasks(db, caller).to_json()
    assert body["data"][0]["project"] == {"id": str(project.id), "name": "Apollo"}


def test_my_tasks_ordered_by_due_date_nulls_last(db, caller):
    now = datetime.now()
    _new_task(db, caller, title="later", dueDate=(now + timedelta(days=3)).isoformat())
    _new_task(db, caller, title="undated")
    _new_task(db, caller, title="sooner", dueDate=(now + timedelta(days=1)).isoformat())

    titles = [t.title for t in get_my_tasks(db, caller).data]
    assert titles == ["sooner", "later", "undated"]


def test_tasks_are_scoped_to_caller(db, caller, other_caller):
    _new_task(db, caller)
    assert get_my_tasks(db, other_caller).data == []


def test_log_hours_accumulates(db, caller):
    task = _new_task(db, caller, estimatedHours=5)
    assert log_task_hours(db, caller, str(task.id), {"hours": 2}).success
    res = log_task_hours(db, caller, str(task.id), {"hours": 3})
    assert res.data.actual_hours == 5
    assert res.data.estimated_hours == 5


def test_log_hours_out_of_range(db, caller):
    task = _new_task(db, caller)
    for hours in (0, -1, 24.5):
        res = log_task_hours(db, caller, str(task.id), {"hours": hours})
        assert res.error == "Hours must be between 0 and 24"
    assert db.get(Task, task.id).actual_hours is None


def test_log_hours_rejects_non_finite_and_keeps_total(db, caller):
    task = _new_task(db, caller)
    assert log_task_hours(db, caller, str(task.id), {"hours": 2}).success
    for hours in ("NaN", "inf"):
        res = log_task_hours(db, caller, str(task.id), {"hours": hours})
        assert res.success is False
        assert res.error == "Hours: Input should be a finite number"
    db.expire_all()
    assert db.get(Task, task.id).actual_hours == 2


def test_create_task_rejects_nan_estimate(db, caller):
    res = create_task(db, caller, {"title": "Estimate me", "estimatedHours": "NaN"})
    assert res.error == "Estimated hours: Input should be a finite number"
    assert db.query(Task).count() == 0


def test_log_hours_other_users_task(db, caller, other_caller):
    task = _new_task(db, caller)
    res = log_task_hours(db, other_caller, str(task.id), {"hours": 1})
    assert res.error == "Task not found or access denied"


def test_status_done_stamps_and_clears_completed_at(db, caller):
    task = _new_task(db, caller)
    done = update_task_status(db, caller, str(task.id), {"status": "DONE"}).data
    assert done.completed_at is not None

    reopened = update_task_status(db, caller, str(task.id), {"status": "IN_PROGRESS"}).data
    assert reopened.completed_at is None
    assert reopened.status == "IN_PROGRESS"


def test_status_rejects_unknown_value(db, caller):
    task = _new_task(db, caller)
    res = update_task_status(db, caller, str(task.id), {"status": "ARCHIVED"})
    assert res.success is False
    assert res.error.startswith("Status")


def test_task_stats(db, caller):
    yesterday = (datetime.now() - timedelta(days=1)).isoformat()
    a = _new_task(db, caller, title="a", dueDate=yesterday)
    b = _new_task(db, caller, title="b", dueDate=yesterday)
    _new_task(db, caller, title="c")
    update_task_status(db, caller, str(a.id), {"status": "DONE"})
    update_task_status(db, caller, str(b.id), {"status": "IN_PROGRESS"})

    stats = get_my_task_stats(db, caller).data
    assert stats == {"total": 3, "inProgress": 1, "completed": 1, "overdue": 1}


def test_filtered_tasks(db, caller):
    now = datetime.now()
    _new_task(db, caller, title="overdue", dueDate=(now - timedelta(days=2)).isoformat())
    _new_task(db, caller, title="this week", dueDate=(now + timedelta(days=3)).isoformat())
    blocked = _new_task(db, caller, title="blocked")
    update_task_status(db, caller, str(blocked.id), {"status": "BLOCKED"})

    def titles(f):
        return [t.title for t in get_filtered_tasks(db, caller, {"filter": f}).data]

    assert titles("overdue") == ["overdue"]
    assert titles("week") == ["this week"]
    assert titles("blocked") == ["blocked"]
    assert len(titles("all")) == 3


def test_filtered_tasks_without_payload_is_all(db, caller):
    _new_task(db, caller)
    assert len(get_filtered_tasks(db, caller).data) == 1
