"""Personal goals and their progress-driven status."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from staffdesk.models.goal import Goal, GoalStatus
from staffdesk.schemas.common import Caller
from staffdesk.schemas.goals import GoalCreate, GoalFilter, GoalOut, GoalProgressUpdate, GoalUpdate
from staffdesk.services.actions import ActionResponse, find_owned, server_action
from staffdesk.services.aggregates import count_if, round_half_up
from staffdesk.services.dates import naive

GOAL_PATHS = ("/employee/goals", "/employee")


def derive_goal_status(progress: float, current_status: str) -> tuple[int, str]:
    """Clamp progress to 0..100 and move the status forward when it moves.

    100 completes the goal from any status; the first non-zero progress takes
    an "active" goal to "in-progress". A goal is never demoted automatically.
    """
    clamped = int(round_half_up(max(0.0, min(100.0, float(progress)))))
    if clamped >= 100:
        return clamped, GoalStatus.completed.value
    if clamped > 0 and current_status == GoalStatus.active.value:
        return clamped, GoalStatus.in_progress.value
    return clamped, current_status


def _ordered(q):
    return q.order_by(Goal.status.asc(), Goal.target_date.asc())


@server_action("Failed to fetch goals")
def get_my_goals(db: Session, caller: Caller):
    goals = _ordered(db.query(Goal).filter(Goal.user_id == caller.id)).all()
    return [GoalOut.model_validate(g) for g in goals]


@server_action("Failed to fetch filtered goals", schema=GoalFilter)
def get_filtered_goals(db: Session, caller: Caller, payload: GoalFilter):
    q = db.query(Goal).filter(Goal.user_id == caller.id)
    if payload.status:
        q = q.filter(Goal.status == payload.status)
    if payload.category:
        q = q.filter(Goal.category == payload.category)
    return [GoalOut.model_validate(g) for g in _ordered(q).all()]


@server_action("Failed to create goal", schema=GoalCreate, revalidate=GOAL_PATHS)
def create_goal(db: Session, caller: Caller, payload: GoalCreate):
    goal = Goal(
        user_id=caller.id,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        priority=payload.priority,
        target_date=naive(payload.target_date) if payload.target_date else None,
        progress=0,
        status=GoalStatus.active.value,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return GoalOut.model_validate(goal)


@server_action("Failed to update goal", schema=GoalUpdate, revalidate=GOAL_PATHS)
def update_goal(db: Session, caller: Caller, goal_id, payload: GoalUpdate):
    goal = find_owned(db, Goal, goal_id, Goal.user_id, caller, "Goal")

    updates = payload.model_dump(exclude_unset=True)
    progress = updates.pop("progress", None)
    if updates.get("target_date"):
        updates["target_date"] = naive(updates["target_date"])
    for field, val in updates.items():
        if val is not None:
            setattr(goal, field, val)
    if progress is not None:
        goal.progress, goal.status = derive_goal_status(progress, goal.status)

    db.commit()
    db.refresh(goal)
    return GoalOut.model_validate(goal)


@server_action("Failed to update progress", schema=GoalProgressUpdate, revalidate=("/employee/goals",))
def update_goal_progress(db: Session, caller: Caller, goal_id, payload: GoalProgressUpdate):
    goal = find_owned(db, Goal, goal_id, Goal.user_id, caller, "Goal")
    goal.progress, goal.status = derive_goal_status(payload.progress, goal.status)
    goal.updated_at = datetime.now()
    db.commit()
    db.refresh(goal)
    return GoalOut.model_validate(goal)


@server_action("Failed to delete goal", revalidate=GOAL_PATHS)
def delete_goal(db: Session, caller: Caller, goal_id):
    goal = find_owned(db, Goal, goal_id, Goal.user_id, caller, "Goal")
    db.delete(goal)
    db.commit()
    return ActionResponse.ok()


@server_action("Failed to fetch goal statistics")
def get_goal_stats(db: Session, caller: Caller):
    total, active, completed, in_progress, avg_progress = db.query(
        func.count(Goal.id),
        count_if(Goal.status == GoalStatus.active.value),
        count_if(Goal.status == GoalStatus.completed.value),
        count_if(Goal.status == GoalStatus.in_progress.value),
        func.avg(Goal.progress),
    ).filter(Goal.user_id == caller.id).one()
    return {
        "total": int(total),
        "active": int(active),
        "completed": int(completed),
        "inProgress": int(in_progress),
        "avgProgress": int(round_half_up(float(avg_progress or 0))),
    }
