"""Self-appraisals within review cycles."""

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from staffdesk.models.appraisal import AppraisalCycle, AppraisalReview, AppraisalStatus
from staffdesk.schemas.appraisals import AppraisalOut, SelfReviewUpdate
from staffdesk.schemas.common import Caller
from staffdesk.services.actions import InvalidState, ValidationFailed, find_owned, server_action
from staffdesk.services.aggregates import count_if, round_half_up, sum_if

logger = logging.getLogger(__name__)

APPRAISAL_PATHS = ("/employee/appraisal",)

_OPEN_CYCLE_STATUSES = (AppraisalStatus.DRAFT.value, AppraisalStatus.IN_PROGRESS.value)


def _active_cycle(db: Session, now: datetime):
    return (
        db.query(AppraisalCycle)
        .filter(
            AppraisalCycle.status.in_(_OPEN_CYCLE_STATUSES),
            AppraisalCycle.start_date <= now,
            AppraisalCycle.end_date >= now,
        )
        .order_by(AppraisalCycle.start_date.desc())
        .first()
    )


def get_or_create_review(db: Session, user_id, cycle: AppraisalCycle) -> AppraisalReview:
    """The caller's review for `cycle`; one row per (user, cycle) even under concurrent first visits."""

    def _lookup():
        return db.query(AppraisalReview).filter(
            AppraisalReview.user_id == user_id,
            AppraisalReview.cycle_id == cycle.id,
        ).first()

    review = _lookup()
    if review:
        return review

    review = AppraisalReview(user_id=user_id, cycle_id=cycle.id, status=AppraisalStatus.DRAFT.value)
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Review for %s in cycle %s created concurrently; reusing it", user_id, cycle.id)
        review = _lookup()
        if review is None:
            raise
    db.refresh(review)
    return review


@server_action("Failed to fetch appraisals")
def get_my_appraisals(db: Session, caller: Caller):
    reviews = (
        db.query(AppraisalReview)
        .filter(AppraisalReview.user_id == caller.id)
        .order_by(AppraisalReview.created_at.desc())
        .all()
    )
    return [AppraisalOut.model_validate(r) for r in reviews]


@server_action("Failed to fetch current appraisal")
def get_current_appraisal(db: Session, caller: Caller):
    cycle = _active_cycle(db, datetime.now())
    if cycle is None:
        return None
    return AppraisalOut.model_validate(get_or_create_review(db, caller.id, cycle))


@server_action("Failed to update self-review", schema=SelfReviewUpdate, revalidate=APPRAISAL_PATHS)
def update_self_review(db: Session, caller: Caller, appraisal_id, payload: SelfReviewUpdate):
    review = find_owned(db, AppraisalReview, appraisal_id, AppraisalReview.user_id, caller, "Appraisal")
    if review.status == AppraisalStatus.COMPLETED.value:
        raise InvalidState("Cannot edit completed appraisal")

    review.self_review = payload.self_review
    if payload.rating is not None:
        review.rating = payload.rating
    db.commit()
    db.refresh(review)
    return AppraisalOut.model_validate(review)


@server_action("Failed to submit appraisal", revalidate=APPRAISAL_PATHS)
def submit_appraisal(db: Session, caller: Caller, appraisal_id):
    review = find_owned(db, AppraisalReview, appraisal_id, AppraisalReview.user_id, caller, "Appraisal")
    if review.status != AppraisalStatus.DRAFT.value:
        raise InvalidState("Appraisal is not in draft status")
    if not (review.self_review or "").strip():
        raise ValidationFailed("Self-review is required before submission")

    review.status = AppraisalStatus.IN_PROGRESS.value
    review.submitted_at = datetime.now()
    db.commit()
    db.refresh(review)
    logger.info("Appraisal %s submitted by %s", review.id, caller.id)
    return AppraisalOut.model_validate(review)


@server_action("Failed to fetch appraisal statistics")
def get_appraisal_stats(db: Session, caller: Caller):
    completed_rated = (AppraisalReview.status == AppraisalStatus.COMPLETED.value) & AppraisalReview.final_rating.isnot(None)
    total, draft, in_progress, completed, rating_sum, rated = db.query(
        func.count(AppraisalReview.id),
        count_if(AppraisalReview.status == AppraisalStatus.DRAFT.value),
        count_if(AppraisalReview.status == AppraisalStatus.IN_PROGRESS.value),
        count_if(AppraisalReview.status == AppraisalStatus.COMPLETED.value),
        sum_if(completed_rated, AppraisalReview.final_rating),
        count_if(completed_rated),
    ).filter(AppraisalReview.user_id == caller.id).one()

    avg = float(rating_sum) / int(rated) if rated else 0.0
    return {
        "total": int(total),
        "draft": int(draft),
        "inProgress": int(in_progress),
        "completed": int(completed),
        "avgRating": round_half_up(avg, 1),
    }


@server_action("Failed to fetch appraisal")
def get_appraisal_by_id(db: Session, caller: Caller, appraisal_id):
    review = find_owned(db, AppraisalReview, appraisal_id, AppraisalReview.user_id, caller, "Appraisal")
    return AppraisalOut.model_validate(review)
