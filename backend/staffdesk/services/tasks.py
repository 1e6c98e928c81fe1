"""Tasks assigned to the current employee."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from staffdesk.models.project import Project
from staffdesk.models.task import Task, TaskStatus
from staffdesk.schemas.common import Caller
from staffdesk.schemas.tasks import TaskCreate, TaskFilter, TaskHoursLog, TaskOut, TaskStatusUpdate
from staffdesk.services.actions import ValidationFailed, find_owned, server_action
from staffdesk.services.aggregates import count_if
from staffdesk.services.dates import day_bounds, naive

logger = logging.getLogger(__name__)

MY_WORK_PATHS = ("/employee/my-work", "/employee")


def _ordered(q):
    # due date ascending with undated tasks last, newest first within a date
    return q.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.created_at.desc())


@server_action("Failed to create task", schema=TaskCreate, revalidate=MY_WORK_PATHS)
def create_task(db: Session, caller: Caller, payload: TaskCreate):
    if payload.project_id is not None and db.get(Project, payload.project_id) is None:
        raise ValidationFailed("Project not found")

    task = Task(
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        project_id=payload.project_id,
        assignee_id=caller.id,
        reporter_id=caller.id,
        due_date=naive(payload.due_date) if payload.due_date else None,
        estimated_hours=payload.estimated_hours,
        status=TaskStatus.TODO.value,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task %s created by %s", task.id, caller.id)
    return TaskOut.model_validate(task)


@server_action("Failed to fetch tasks")
def get_my_tasks(db: Session, caller: Caller):
    tasks = _ordered(db.query(Task).filter(Task.assignee_id == caller.id)).all()
    return [TaskOut.model_validate(t) for t in tasks]


@server_action("Failed to fetch task statistics")
def get_my_task_stats(db: Session, caller: Caller):
    now = datetime.now()
    total, in_progress, completed, overdue = db.query(
        func.count(Task.id),
        count_if(Task.status == TaskStatus.IN_PROGRESS.value),
        count_if(Task.status == TaskStatus.DONE.value),
        count_if(and_(Task.status != TaskStatus.DONE.value, Task.due_date < now)),
    ).filter(Task.assignee_id == caller.id).one()
    return {
        "total": int(total),
        "inProgress": int(in_progress),
        "completed": int(completed),
        "overdue": int(overdue),
    }


@server_action("Failed to update task status", schema=TaskStatusUpdate, revalidate=MY_WORK_PATHS)
def update_task_status(db: Session, caller: Caller, task_id, payload: TaskStatusUpdate):
    task = find_owned(db, Task, task_id, Task.assignee_id, caller, "Task")

    if payload.status == TaskStatus.DONE.value and task.status != TaskStatus.DONE.value:
        task.completed_at = datetime.now()
    elif payload.status != TaskStatus.DONE.value:
        task.completed_at = None
    task.status = payload.status

    db.commit()
    db.refresh(task)
    return TaskOut.model_validate(task)


@server_action("Failed to log hours", schema=TaskHoursLog, revalidate=("/employee/my-work",))
def log_task_hours(db: Session, caller: Caller, task_id, payload: TaskHoursLog):
    task = find_owned(db, Task, task_id, Task.assignee_id, caller, "Task")
    task.actual_hours = (task.actual_hours or 0) + payload.hours
    db.commit()
    db.refresh(task)
    return TaskOut.model_validate(task)


@server_action("Failed to fetch filtered tasks", schema=TaskFilter)
def get_filtered_tasks(db: Session, caller: Caller, payload: TaskFilter):
    now = datetime.now()
    q = db.query(Task).filter(Task.assignee_id == caller.id)

    if payload.filter == "today":
        start, end = day_bounds(now)
        q = q.filter(Task.due_date >= start, Task.due_date <= end)
    elif payload.filter == "week":
        q = q.filter(Task.due_date >= now, Task.due_date <= now + timedelta(days=7))
    elif payload.filter == "overdue":
        q = q.filter(Task.due_date < now, Task.status != TaskStatus.DONE.value)
    elif payload.filter == "blocked":
        q = q.filter(Task.status == TaskStatus.BLOCKED.value)

    return [TaskOut.model_validate(t) for t in _ordered(q).all()]
