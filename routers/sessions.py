"""
Sessions Router
API endpoint for post-session quality verdicts
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import repository
from database import get_db
from services import SessionEvaluator, SessionVerdict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])

VERDICT_LABELS = {
    SessionVerdict.PRODUCTIVE: ("PRODUCTIVE", "New personal records with nothing regressing"),
    SessionVerdict.MAINTAINING: ("MAINTAINING", "Stimulus matched"),
    SessionVerdict.SUBOPTIMAL: ("SUBOPTIMAL", "Performance regressed without a record"),
    SessionVerdict.JUNK: ("UNSTRUCTURED", "Does not contribute to progression"),
    SessionVerdict.RECOVERY: ("RECOVERY", "Planned light session"),
}
CALIBRATING_LABEL = ("CALIBRATING", "Establishing a baseline for this block")


@router.get("/{workout_id}/evaluation")
async def evaluate_session(
    workout_id: str,
    planned_light: bool = Query(default=False),
    history_limit: int = Query(default=30, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """
    Classify a completed workout as productive, maintaining, suboptimal,
    junk or recovery.

    - **workout_id**: UUID of the completed workout
    - **planned_light**: Treat the session as a planned light day
    - **history_limit**: Prior sets per exercise to compare against
    """
    workout = repository.get_workout(db, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    if not workout.is_completed:
        raise HTTPException(status_code=400, detail="Workout is not completed yet")

    exercise_ids = [e.exercise.id for e in workout.exercises]
    history = repository.get_histories(db, exercise_ids, limit=history_limit,
                                       exclude_workout_id=workout_id,
                                       before=workout.date_completed)
    prior_sessions = repository.count_prior_block_sessions(db, workout.block_id,
                                                           workout.date_completed)

    evaluation = SessionEvaluator().evaluate(
        workout, history, prior_block_sessions=prior_sessions, planned_light=planned_light
    )

    # Calibration only relabels a verdict that has nothing to compare against yet
    if evaluation.calibrating and evaluation.verdict in (SessionVerdict.JUNK, SessionVerdict.MAINTAINING):
        label, description = CALIBRATING_LABEL
    else:
        label, description = VERDICT_LABELS[evaluation.verdict]

    return {
        "workout_id": workout.id,
        "label": label,
        "description": description,
        **evaluation.to_dict()
    }
