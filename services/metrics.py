"""
Strength Metrics
Estimated one-rep-max and set volume helpers
"""

from typing import Iterable, Optional

from .models import LoggedSet


def calculate_1rm(weight: float, reps: int) -> float:
    """
    Estimate a one-rep-max with the Epley formula.

    Args:
        weight: Weight lifted
        reps: Number of reps completed

    Returns:
        Estimated 1RM rounded to a whole number and never below the weight,
        the weight itself for a single, or 0 when the pair is not computable
    """
    if weight is None or reps is None:
        return 0
    if reps <= 0 or weight <= 0:
        return 0
    if reps == 1:
        return weight
    # Rounding must not take a light load below the load itself
    return max(weight, round(weight * (1 + reps / 30)))


def set_e1rm(logged_set: LoggedSet) -> float:
    """Estimated 1RM of a logged set, 0 for warm-ups and incomplete sets"""
    if not logged_set.is_comparable:
        return 0
    return calculate_1rm(logged_set.weight, logged_set.reps)


def best_e1rm(sets: Iterable[LoggedSet]) -> float:
    """Highest estimated 1RM across the comparable sets"""
    return max((set_e1rm(s) for s in sets), default=0)


def set_volume(weight: Optional[float], reps: Optional[int]) -> float:
    if not weight or not reps:
        return 0
    return weight * reps
