"""
Pattern Detection Service
Discovers recurring training structure from several weeks of sessions

CONCEPTS:
1. Weekly recurrence - every candidate pattern is scored by the fraction
   of observed weeks in which it shows up; that ratio is the confidence
2. Training split - recurring muscle-group groupings of a session
3. Preferred days - ISO weekdays trained week after week
4. Pairings - exercises habitually logged in the same session
5. Rep ranges - the rep bracket most weeks are dominated by
"""

import logging
from collections import Counter
from itertools import combinations
from typing import Dict, List, Optional

import pandas as pd

from .models import DetectedPattern, PatternType, Workout

logger = logging.getLogger(__name__)

DAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

PUSH_GROUPS = {'chest', 'shoulders', 'triceps'}
PULL_GROUPS = {'back', 'biceps', 'lats', 'traps', 'forearms'}
LEG_GROUPS = {'legs', 'quads', 'quadriceps', 'hamstrings', 'glutes', 'calves'}
UPPER_GROUPS = PUSH_GROUPS | PULL_GROUPS | {'arms'}

REP_RANGES = [
    ('strength', 1, 5),
    ('hypertrophy', 6, 12),
    ('endurance', 13, None),
]


class PatternDetector:
    """
    Infers recurring structure from completed workouts.

    Emits nothing until min_sessions sessions exist, and never emits a
    pattern below min_confidence.
    """

    def __init__(self, min_sessions: int = 4, min_confidence: float = 0.5,
                 lookback_weeks: int = 8, min_pair_sessions: int = 3,
                 max_pairings: int = 5):
        self.min_sessions = min_sessions
        self.min_confidence = min_confidence
        self.lookback_weeks = lookback_weeks
        self.min_pair_sessions = min_pair_sessions
        self.max_pairings = max_pairings

    def detect(self, workouts: List[Workout]) -> List[DetectedPattern]:
        """
        Run every detector over the completed workouts.

        Returns:
            Patterns sorted by confidence, or an empty list when there is
            not enough data
        """
        df = self._sessions_frame(workouts)
        if len(df) < self.min_sessions:
            logger.debug("Only %d completed sessions, not enough for patterns", len(df))
            return []

        total_weeks = self._total_weeks(df)

        patterns = []
        for found in (self._detect_training_days(df, total_weeks),
                      self._detect_split(df, total_weeks)):
            if found:
                patterns.append(found)
        patterns.extend(self._detect_pairings(df, total_weeks))
        rep_pattern = self._detect_rep_range(workouts, df, total_weeks)
        if rep_pattern:
            patterns.append(rep_pattern)

        patterns = [p for p in patterns if p.confidence >= self.min_confidence]
        patterns.sort(key=lambda p: p.confidence, reverse=True)
        return patterns

    def _sessions_frame(self, workouts: List[Workout]) -> pd.DataFrame:
        """One row per completed workout inside the lookback window"""
        rows = []
        for w in workouts:
            if not w.is_completed:
                continue
            rows.append({
                'workout_id': w.id,
                'date': w.date_completed,
                'focus': w.focus,
                'signature': ' + '.join(w.muscle_groups),
                'exercises': sorted({e.exercise.name for e in w.exercises}),
            })

        df = pd.DataFrame(rows, columns=['workout_id', 'date', 'focus', 'signature', 'exercises'])
        if df.empty:
            return df

        df['date'] = pd.to_datetime(df['date'])
        df['weekday'] = df['date'].dt.weekday
        df['week_start'] = (df['date'] - pd.to_timedelta(df['weekday'], unit='D')).dt.normalize()

        cutoff = df['week_start'].max() - pd.Timedelta(weeks=self.lookback_weeks - 1)
        return df[df['week_start'] >= cutoff].sort_values('date').reset_index(drop=True)

    def _total_weeks(self, df: pd.DataFrame) -> int:
        """Calendar weeks spanned, including weeks with no training"""
        span = df['week_start'].max() - df['week_start'].min()
        return int(span.days // 7) + 1

    def _detect_training_days(self, df: pd.DataFrame, total_weeks: int) -> Optional[DetectedPattern]:
        weeks_per_day = df.groupby('weekday')['week_start'].nunique()
        ratios = (weeks_per_day / total_weeks).clip(upper=1.0)

        preferred = ratios[ratios >= self.min_confidence].sort_index()
        if preferred.empty:
            return None

        days = [DAY_NAMES[d] for d in preferred.index]
        return DetectedPattern(
            type=PatternType.PREFERRED_TRAINING_DAY,
            name='Training Schedule',
            description=f"You typically train on {', '.join(days)}",
            confidence=round(float(preferred.mean()), 3),
            data={
                'preferred_days': days,
                'day_frequency': {DAY_NAMES[d]: round(float(r), 3) for d, r in ratios.items()},
                'weeks_observed': total_weeks,
            }
        )

    def _detect_split(self, df: pd.DataFrame, total_weeks: int) -> Optional[DetectedPattern]:
        grouped = df[df['signature'] != '']
        if grouped.empty:
            return None

        weeks_per_signature = grouped.groupby('signature')['week_start'].nunique()
        recurring = weeks_per_signature[weeks_per_signature / total_weeks >= self.min_confidence]
        if recurring.empty:
            return None

        signatures = list(recurring.sort_values(ascending=False).index)
        weekly = grouped[grouped['signature'].isin(signatures)].groupby('week_start')['signature'].agg(set)
        full_weeks = sum(1 for found in weekly if found >= set(signatures))
        confidence = full_weeks / total_weeks

        name, splits = _name_split([s.split(' + ') for s in signatures])
        days_per_week = round(len(df) / total_weeks, 1)
        return DetectedPattern(
            type=PatternType.TRAINING_SPLIT,
            name=name,
            description=f"You train {name} approximately {days_per_week:g} days/week",
            confidence=round(confidence, 3),
            data={
                'splits': splits,
                'muscle_groupings': signatures,
                'days_per_week': days_per_week,
                'focus_distribution': dict(Counter(f for f in df['focus'] if f)),
            }
        )

    def _detect_pairings(self, df: pd.DataFrame, total_weeks: int) -> List[DetectedPattern]:
        pair_sessions = Counter()
        pair_weeks: Dict[tuple, set] = {}
        for exercises, week in zip(df['exercises'], df['week_start']):
            for pair in combinations(exercises, 2):
                pair_sessions[pair] += 1
                pair_weeks.setdefault(pair, set()).add(week)

        patterns = []
        for pair, count in pair_sessions.items():
            if count < self.min_pair_sessions:
                continue
            confidence = min(1.0, len(pair_weeks[pair]) / total_weeks)
            first, second = pair
            patterns.append(DetectedPattern(
                type=PatternType.EXERCISE_PAIRING,
                name=f"{first} + {second}",
                description=f"You typically pair {first} with {second}",
                confidence=round(confidence, 3),
                data={
                    'exercises': [first, second],
                    'co_occurrence': count,
                    'weeks_together': len(pair_weeks[pair]),
                }
            ))

        patterns.sort(key=lambda p: (p.confidence, p.data['co_occurrence']), reverse=True)
        return patterns[:self.max_pairings]

    def _detect_rep_range(self, workouts: List[Workout], df: pd.DataFrame,
                          total_weeks: int) -> Optional[DetectedPattern]:
        week_of = dict(zip(df['workout_id'], df['week_start']))
        rows = [
            {'week_start': week_of[w.id], 'range': _rep_range(s.reps)}
            for w in workouts if w.id in week_of
            for e in w.exercises
            for s in e.sets
            if s.is_comparable
        ]
        if not rows:
            return None

        sets = pd.DataFrame(rows)
        # Dominant range per week
        dominant = sets.groupby('week_start')['range'].agg(lambda r: r.value_counts().idxmax())
        counts = dominant.value_counts()
        preferred = counts.idxmax()
        confidence = counts[preferred] / total_weeks

        low, high = next((lo, hi) for name, lo, hi in REP_RANGES if name == preferred)
        bracket = f"{low}-{high}" if high else f"{low}+"
        share = sets['range'].value_counts(normalize=True)
        return DetectedPattern(
            type=PatternType.REP_RANGE_PREFERENCE,
            name=f"{preferred.title()} Rep Range",
            description=f"Most of your working sets are {bracket} reps",
            confidence=round(float(confidence), 3),
            data={
                'preferred_range': preferred,
                'range_share': {k: round(float(v), 3) for k, v in share.items()},
            }
        )


def _rep_range(reps: int) -> str:
    for name, low, high in REP_RANGES:
        if reps >= low and (high is None or reps <= high):
            return name
    return REP_RANGES[0][0]


def _classify_grouping(groups: List[str]) -> str:
    groups = set(groups)
    has_push = bool(groups & PUSH_GROUPS)
    has_pull = bool(groups & PULL_GROUPS)
    has_legs = bool(groups & LEG_GROUPS)
    has_upper = bool(groups & UPPER_GROUPS)

    if has_upper and has_legs:
        return 'full body'
    if has_legs:
        return 'legs'
    if has_push and not has_pull:
        return 'push'
    if has_pull and not has_push:
        return 'pull'
    if has_upper:
        return 'upper'
    return ' + '.join(sorted(groups))


def _name_split(groupings: List[List[str]]):
    """Name a split from its recurring muscle-group groupings"""
    kinds = [_classify_grouping(g) for g in groupings]
    kind_set = set(kinds)

    if {'push', 'pull', 'legs'} <= kind_set:
        return 'Push/Pull/Legs', ['Push', 'Pull', 'Legs']
    if 'legs' in kind_set and kind_set & {'upper', 'push', 'pull'}:
        return 'Upper/Lower', ['Upper', 'Lower']
    if kind_set == {'full body'}:
        return 'Full Body', ['Full Body']

    body_parts = sorted({g for grouping in groupings for g in grouping})
    if len(groupings) >= 3 and all(len(g) == 1 for g in groupings):
        return 'Body Part Split', [p.title() for p in body_parts]
    return 'Custom Split', [k.title() for k in kinds[:4]]
