"""
Personal Record Detection
Classifies a newly logged set against an exercise's set history

The detector only classifies. Persisting the is_pr flag and notifying
anyone about it belongs to the caller.

Also holds the set-to-set comparison used to judge whether an exercise
progressed, matched or regressed since its last exposure.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .metrics import calculate_1rm, set_volume
from .models import HistoricalRecord, LoggedSet

logger = logging.getLogger(__name__)

# Estimated 1RM gains smaller than this are noise when comparing two sets
E1RM_NOISE_THRESHOLD = 0.01


class RecordType(str, Enum):
    """Kinds of personal record, in detection priority order"""
    WEIGHT = "weight"
    REPS = "reps"
    E1RM = "e1rm"


@dataclass
class PersonalRecord:
    """A detected record and the best it beat"""
    record_type: RecordType
    value: float
    previous_best: float

    @property
    def delta(self) -> float:
        return self.value - self.previous_best

    def to_dict(self):
        return {
            'record_type': self.record_type.value,
            'value': self.value,
            'previous_best': self.previous_best,
            'delta': self.delta
        }


def build_historical_record(history: Iterable[LoggedSet]) -> Optional[HistoricalRecord]:
    """
    Summarize the best-known performance in a set history.

    Warm-ups and sets missing weight or reps are ignored.

    Returns:
        HistoricalRecord, or None when no set qualifies
    """
    qualifying = [s for s in history if s.is_comparable]
    if not qualifying:
        return None

    reps_at_weight = {}
    for s in qualifying:
        key = float(s.weight)
        reps_at_weight[key] = max(reps_at_weight.get(key, 0), s.reps)

    return HistoricalRecord(
        max_weight=max(float(s.weight) for s in qualifying),
        best_e1rm=max(calculate_1rm(s.weight, s.reps) for s in qualifying),
        reps_at_weight=reps_at_weight,
        set_count=len(qualifying)
    )


def detect_personal_record(new_set: LoggedSet,
                           history: Iterable[LoggedSet]) -> Optional[PersonalRecord]:
    """
    Decide whether a new set is a personal record, and which kind.

    Checks run in priority order and the first match wins:
    1. Weight PR - heavier than anything in history
    2. Reps PR - more reps than ever at this exact weight
    3. E1RM PR - higher estimated 1RM than anything in history

    Args:
        new_set: The set just logged
        history: Prior sets of the same exercise, excluding new_set

    Returns:
        PersonalRecord, or None for "no record"
    """
    if not new_set.is_comparable:
        return None

    record = build_historical_record(history)
    if record is None:
        logger.debug("No qualifying history, cannot establish a record")
        return None

    weight = float(new_set.weight)

    if weight > record.max_weight:
        return PersonalRecord(RecordType.WEIGHT, weight, record.max_weight)

    previous_reps = record.max_reps_at(weight)
    if previous_reps is not None and new_set.reps > previous_reps:
        return PersonalRecord(RecordType.REPS, new_set.reps, previous_reps)

    e1rm = calculate_1rm(new_set.weight, new_set.reps)
    if e1rm > record.best_e1rm:
        return PersonalRecord(RecordType.E1RM, e1rm, record.best_e1rm)

    return None


# =============================================================================
# SET-TO-SET COMPARISON
# =============================================================================

class ComparisonType(str, Enum):
    """Outcome of comparing a set with its previous comparable set"""
    WEIGHT_INCREASE = "weight_increase"
    REP_INCREASE = "rep_increase"
    VOLUME_INCREASE = "volume_increase"
    E1RM_INCREASE = "e1rm_increase"
    RPE_DECREASE = "rpe_decrease"
    MATCHED = "matched"
    REGRESSED = "regressed"

    @property
    def is_progression(self) -> bool:
        return self not in (ComparisonType.MATCHED, ComparisonType.REGRESSED)


@dataclass
class SetComparison:
    type: ComparisonType
    delta: float
    message: str


def compare_sets(current: LoggedSet, previous: Optional[LoggedSet]) -> Optional[SetComparison]:
    """
    Compare a set with the previous comparable set.

    Missing effort is read as RPE 10.

    Returns:
        SetComparison, or None when either set is not comparable
    """
    if previous is None:
        return None
    if not current.is_comparable or not previous.is_comparable:
        return None

    weight, reps = current.weight, current.reps
    prev_weight, prev_reps = previous.weight, previous.reps
    rpe = current.rpe or 10
    prev_rpe = previous.rpe or 10

    if weight > prev_weight and reps >= prev_reps:
        delta = weight - prev_weight
        return SetComparison(ComparisonType.WEIGHT_INCREASE, delta, f"+{delta:g} lb")

    if reps > prev_reps and weight >= prev_weight:
        delta = reps - prev_reps
        return SetComparison(ComparisonType.REP_INCREASE, delta,
                             f"+{delta} rep{'s' if delta > 1 else ''}")

    volume = set_volume(weight, reps)
    prev_volume = set_volume(prev_weight, prev_reps)
    if volume > prev_volume:
        delta = volume - prev_volume
        percent = delta / prev_volume * 100 if prev_volume else 100
        return SetComparison(ComparisonType.VOLUME_INCREASE, delta, f"+{percent:.0f}% volume")

    e1rm = calculate_1rm(weight, reps)
    prev_e1rm = calculate_1rm(prev_weight, prev_reps)
    if e1rm > prev_e1rm * (1 + E1RM_NOISE_THRESHOLD):
        delta = e1rm - prev_e1rm
        return SetComparison(ComparisonType.E1RM_INCREASE, delta, f"+{round(delta)} lb E1RM")

    if weight == prev_weight and reps == prev_reps:
        if rpe < prev_rpe:
            delta = prev_rpe - rpe
            return SetComparison(ComparisonType.RPE_DECREASE, delta, f"RPE {prev_rpe:g} -> {rpe:g}")
        if rpe - prev_rpe <= 0.5:
            return SetComparison(ComparisonType.MATCHED, 0, "Stimulus matched, not progressed")

    if weight < prev_weight or reps < prev_reps:
        reasons = []
        if weight < prev_weight:
            reasons.append(f"{prev_weight - weight:.0f} lb")
        if reps < prev_reps:
            rep_delta = prev_reps - reps
            reasons.append(f"{rep_delta} rep{'s' if rep_delta > 1 else ''}")
        return SetComparison(ComparisonType.REGRESSED, prev_e1rm - e1rm,
                             f"Regressed: -{', '.join(reasons)}")

    # Same load and reps at a clearly higher effort
    if rpe > prev_rpe:
        return SetComparison(ComparisonType.REGRESSED, rpe - prev_rpe,
                             f"Regressed: RPE {prev_rpe:g} -> {rpe:g}")

    return SetComparison(ComparisonType.MATCHED, 0, "Stimulus matched, not progressed")


def find_previous_set(current: LoggedSet, previous_sets: List[LoggedSet]) -> Optional[LoggedSet]:
    """
    Pick the set to compare against.

    Prefers the previous set with the same order index, otherwise the most
    recent working set. previous_sets is ordered most recent first.
    """
    working = [s for s in previous_sets if not s.is_warmup]
    if not working:
        return None

    for s in working:
        if s.set_order == current.set_order:
            return s
    return working[0]
