"""
Patterns Router
API endpoint for multi-week training pattern discovery
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import repository
from database import get_db
from services import PatternDetector

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patterns", tags=["Patterns"])


@router.get("")
async def detect_patterns(
    weeks: int = Query(default=8, ge=4, le=52),
    min_confidence: float = Query(default=0.5, ge=0, le=1),
    db: Session = Depends(get_db)
):
    """
    Discover recurring training structure.

    Detects training split, preferred days, exercise pairings and rep range
    preference. Each pattern's confidence is the fraction of observed weeks
    in which it recurs.

    - **weeks**: Number of weeks to analyze (4-52)
    - **min_confidence**: Lowest confidence to report
    """
    workouts = repository.get_completed_workouts(db, weeks=weeks)
    detector = PatternDetector(min_confidence=min_confidence, lookback_weeks=weeks)
    patterns = detector.detect(workouts)

    if not patterns:
        logger.info("No patterns over %d workouts", len(workouts))
        return {
            "status": "not_enough_data",
            "message": f"Need at least {detector.min_sessions} completed sessions with recurring structure",
            "workouts_analyzed": len(workouts),
            "patterns": []
        }

    return {
        "status": "ok",
        "period_weeks": weeks,
        "workouts_analyzed": len(workouts),
        "patterns": [p.to_dict() for p in patterns]
    }
