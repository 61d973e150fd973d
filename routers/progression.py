"""
Progression Router
API endpoint for next-session progression targets
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import repository
from database import get_db
from services import ProgressionRecommender

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progression", tags=["Progression"])


@router.get("/{exercise_id}")
async def get_progression_target(
    exercise_id: str,
    limit: int = Query(default=10, ge=2, le=50),
    db: Session = Depends(get_db)
):
    """
    Suggest the next session's weight, reps and RPE for an exercise.

    - **exercise_id**: UUID of the exercise
    - **limit**: Number of recent sets to base the suggestion on
    """
    exercise = repository.get_exercise(db, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")

    history = repository.get_exercise_history(db, exercise_id, limit=limit)
    suggestion = ProgressionRecommender().recommend(exercise, history)

    if suggestion is None:
        logger.info("No progression suggestion for exercise %s (%d sets)", exercise_id, len(history))
        return {
            "exercise": {"id": exercise.id, "name": exercise.name},
            "status": "no_suggestion",
            "message": "Not enough comparable history for a suggestion",
            "sets_found": len(history)
        }

    return {
        "exercise": {"id": exercise.id, "name": exercise.name},
        "status": "ok",
        "suggestion": suggestion.to_dict()
    }
