"""
Readiness Router
API endpoints for daily readiness assessment and session adjustment
"""

import logging
from datetime import date

from fastapi import APIRouter

from schemas import AdjustPlanRequest, ReadinessRequest
from services import ReadinessAdjuster
from services.models import Exercise, Modality, PlannedSet, ReadinessCheckIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/readiness", tags=["Readiness"])

NO_ASSESSMENT = {
    "status": "no_assessment",
    "message": "Sleep, soreness and stress must each be rated 1-5"
}


def _modality(value: str) -> Modality:
    try:
        return Modality(value.lower())
    except ValueError:
        return Modality.STRENGTH


def _assess(body: ReadinessRequest):
    adjuster = ReadinessAdjuster()
    check_in = ReadinessCheckIn(
        check_in_date=body.check_in_date or date.today(),
        sleep_quality=body.sleep_quality,
        muscle_soreness=body.muscle_soreness,
        stress_level=body.stress_level,
        adjustment_applied=body.override
    )
    assessment, decision = adjuster.decide_check_in(check_in)
    return adjuster, assessment, decision


@router.post("/assess")
async def assess_readiness(body: ReadinessRequest):
    """
    Score today's check-in and pick the adjustment level.

    An override, when given, governs the session; the computed
    suggestion is still returned alongside it.

    Two or more ratings of 1 force at least "light", whatever the score.
    This applies to soreness 1 and stress 1 as well, so callers that
    treat 1 as fresh or calm should send an override for such days.
    The response then carries `forced_downgrade: true`.
    """
    adjuster, assessment, decision = _assess(body)
    if assessment is None:
        logger.info("Readiness check-in incomplete or out of range")
        return NO_ASSESSMENT

    return {
        "status": "ok",
        "assessment": assessment.to_dict(),
        "decision": decision.to_dict(),
        "multipliers": adjuster.multipliers_for(decision.level).to_dict()
    }


@router.post("/adjust")
async def adjust_session(body: AdjustPlanRequest):
    """
    Apply today's readiness level to a planned session.

    Returns the adjusted sets with their original load and RPE.
    """
    adjuster, assessment, decision = _assess(body)
    if assessment is None:
        return NO_ASSESSMENT

    planned = [
        PlannedSet(
            exercise=Exercise(
                id=s.exercise_id,
                name=s.exercise_name,
                modality=_modality(s.modality)
            ),
            set_order=s.set_order,
            target_load=s.target_load,
            target_reps=s.target_reps,
            target_rpe=s.target_rpe,
            is_warmup=s.is_warmup
        )
        for s in body.planned_sets
    ]
    adjusted = adjuster.apply_adjustments(planned, decision.level)

    return {
        "status": "ok",
        "decision": decision.to_dict(),
        "multipliers": adjuster.multipliers_for(decision.level).to_dict(),
        "planned_sets": [
            {
                "exercise_id": s.exercise.id,
                "set_order": s.set_order,
                "target_load": s.target_load,
                "target_reps": s.target_reps,
                "target_rpe": s.target_rpe,
                "is_warmup": s.is_warmup,
                "optional": s.optional,
                "original_load": s.original_load,
                "original_rpe": s.original_rpe
            }
            for s in adjusted
        ]
    }
