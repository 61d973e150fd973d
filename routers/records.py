"""
Records Router
API endpoints for estimated 1RM and personal record detection
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import repository
from database import get_db
from schemas import SetCheckRequest
from services import calculate_1rm, build_historical_record, detect_personal_record
from services.models import LoggedSet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["Records"])


@router.get("/e1rm")
async def estimate_one_rep_max(
    weight: float = Query(..., gt=0),
    reps: int = Query(..., ge=1, le=30)
):
    """
    Estimate a one-rep-max with the Epley formula.

    - **weight**: Weight lifted
    - **reps**: Number of reps completed
    """
    return {
        "weight": weight,
        "reps": reps,
        "formula": "epley",
        "estimated_1rm": calculate_1rm(weight, reps)
    }


@router.post("/check")
async def check_personal_record(
    body: SetCheckRequest,
    history_limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """
    Classify a newly logged set against the exercise's stored history.

    The set's own workout is excluded from the comparison. Nothing is
    written; the caller decides whether to store the is_pr flag.

    - **history_limit**: How many prior sets to compare against
    """
    exercise = repository.get_exercise(db, body.exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")

    history = repository.get_exercise_history(
        db, body.exercise_id, limit=history_limit, exclude_workout_id=body.workout_id
    )
    new_set = LoggedSet(
        weight=body.weight,
        reps=body.reps,
        rpe=body.rpe,
        is_warmup=body.is_warmup,
        exercise_id=body.exercise_id,
        workout_id=body.workout_id
    )

    record = detect_personal_record(new_set, history)
    best = build_historical_record(history)

    return {
        "exercise": {"id": exercise.id, "name": exercise.name},
        "is_pr": record is not None,
        "record": record.to_dict() if record else None,
        "estimated_1rm": calculate_1rm(body.weight, body.reps),
        "historical_best": {
            "max_weight": best.max_weight,
            "best_e1rm": best.best_e1rm,
            "sets_compared": best.set_count
        } if best else None
    }
