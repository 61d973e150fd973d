"""
Request Schemas
Pydantic bodies accepted by the API routers
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from services.readiness import ReadinessLevel


class SetCheckRequest(BaseModel):
    """A freshly logged set to classify against stored history"""
    exercise_id: str
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=1)
    rpe: Optional[float] = Field(default=None, ge=1, le=10)
    is_warmup: bool = False
    workout_id: Optional[str] = None


class ReadinessRequest(BaseModel):
    """
    Daily check-in ratings.

    Ratings are deliberately unconstrained here: missing or out-of-range
    values are answered with "no assessment" instead of a 422.

    Any two ratings of 1 floor the level at "light", including a rested
    day with soreness 1 and stress 1.
    """
    sleep_quality: Optional[int] = None
    muscle_soreness: Optional[int] = None
    stress_level: Optional[int] = None
    override: Optional[ReadinessLevel] = None
    check_in_date: Optional[date] = None


class PlannedSetRequest(BaseModel):
    exercise_id: str
    exercise_name: str = ''
    modality: str = 'strength'
    set_order: int
    target_load: Optional[float] = None
    target_reps: Optional[int] = None
    target_rpe: Optional[float] = None
    is_warmup: bool = False


class AdjustPlanRequest(ReadinessRequest):
    planned_sets: List[PlannedSetRequest] = Field(default_factory=list)
