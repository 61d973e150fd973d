"""
Tests for personal record detection and set-to-set comparison
"""

import pytest

from builders import make_set
from services.record_detector import (
    ComparisonType,
    PersonalRecord,
    RecordType,
    build_historical_record,
    compare_sets,
    detect_personal_record,
    find_previous_set,
)


class TestHistoricalRecord:

    def test_summarizes_qualifying_sets(self):
        history = [make_set(135, 5), make_set(145, 3), make_set(135, 8), make_set(225, 5, is_warmup=True)]
        record = build_historical_record(history)

        assert record.max_weight == 145
        assert record.max_reps_at(135) == 8
        assert record.max_reps_at(145) == 3
        assert record.max_reps_at(150) is None
        assert record.set_count == 3

    def test_no_qualifying_sets(self):
        history = [make_set(135, 5, is_warmup=True), make_set(None, 5), make_set(100, None)]
        assert build_historical_record(history) is None


class TestDetectPersonalRecord:

    def test_weight_pr(self):
        record = detect_personal_record(make_set(145, 5), [make_set(135, 5)])

        assert record.record_type == RecordType.WEIGHT
        assert record.value == 145
        assert record.previous_best == 135
        assert record.delta == 10

    @pytest.mark.parametrize("reps,rpe", [(1, 10), (5, 6), (12, None)])
    def test_heavier_than_history_is_always_weight_pr(self, reps, rpe):
        history = [make_set(200, 10), make_set(190, 12)]
        record = detect_personal_record(make_set(205, reps, rpe), history)
        assert record.record_type == RecordType.WEIGHT

    def test_reps_pr_at_same_weight(self):
        history = [make_set(135, 5), make_set(145, 3)]
        record = detect_personal_record(make_set(135, 6), history)

        assert record.record_type == RecordType.REPS
        assert record.value == 6
        assert record.previous_best == 5

    def test_e1rm_pr_at_new_weight(self):
        # 95 x 8 -> 120 beats 100 x 5 -> 117, but 95 was never lifted before
        record = detect_personal_record(make_set(95, 8), [make_set(100, 5)])

        assert record.record_type == RecordType.E1RM
        assert record.value == 120
        assert record.previous_best == 117

    def test_weight_beats_other_kinds(self):
        # Also an e1RM PR, but only one kind is reported
        record = detect_personal_record(make_set(150, 10), [make_set(145, 5)])
        assert isinstance(record, PersonalRecord)
        assert record.record_type == RecordType.WEIGHT

    def test_matching_history_is_not_a_record(self):
        assert detect_personal_record(make_set(100, 5), [make_set(100, 5)]) is None

    def test_lighter_set_is_not_a_record(self):
        assert detect_personal_record(make_set(90, 5), [make_set(100, 5)]) is None

    def test_empty_history(self):
        assert detect_personal_record(make_set(500, 1), []) is None

    def test_history_without_qualifying_sets(self):
        history = [make_set(100, 5, is_warmup=True), make_set(None, 10), make_set(80, None)]
        assert detect_personal_record(make_set(500, 1), history) is None

    def test_warmup_set_is_never_a_record(self):
        assert detect_personal_record(make_set(200, 5, is_warmup=True), [make_set(100, 5)]) is None

    def test_bodyweight_reps_pr(self):
        record = detect_personal_record(make_set(0, 12), [make_set(0, 10), make_set(0, 8)])
        assert record.record_type == RecordType.REPS
        assert record.value == 12

    def test_bodyweight_matching_reps(self):
        assert detect_personal_record(make_set(0, 10), [make_set(0, 10)]) is None

    def test_weighted_bodyweight_movement_is_weight_pr(self):
        record = detect_personal_record(make_set(10, 5), [make_set(0, 12)])
        assert record.record_type == RecordType.WEIGHT

    def test_does_not_mutate_history(self):
        history = [make_set(135, 5)]
        detect_personal_record(make_set(145, 5), history)
        assert history == [make_set(135, 5)]


class TestCompareSets:

    def test_weight_increase(self):
        result = compare_sets(make_set(105, 5), make_set(100, 5))
        assert result.type == ComparisonType.WEIGHT_INCREASE
        assert result.delta == 5

    def test_rep_increase(self):
        result = compare_sets(make_set(100, 7), make_set(100, 5))
        assert result.type == ComparisonType.REP_INCREASE
        assert result.delta == 2

    def test_volume_increase_with_lighter_load(self):
        result = compare_sets(make_set(95, 8), make_set(100, 5))
        assert result.type == ComparisonType.VOLUME_INCREASE

    def test_rpe_decrease(self):
        result = compare_sets(make_set(100, 5, 7), make_set(100, 5, 8))
        assert result.type == ComparisonType.RPE_DECREASE
        assert result.delta == 1

    def test_matched(self):
        result = compare_sets(make_set(100, 5, 8), make_set(100, 5, 8))
        assert result.type == ComparisonType.MATCHED
        assert not result.type.is_progression

    def test_regressed_weight(self):
        result = compare_sets(make_set(90, 5), make_set(100, 5))
        assert result.type == ComparisonType.REGRESSED
        assert "10 lb" in result.message

    def test_regressed_effort_at_same_load(self):
        result = compare_sets(make_set(100, 5, 10), make_set(100, 5, 8))
        assert result.type == ComparisonType.REGRESSED

    def test_not_comparable(self):
        assert compare_sets(make_set(100, 5), None) is None
        assert compare_sets(make_set(100, 5, is_warmup=True), make_set(100, 5)) is None
        assert compare_sets(make_set(100, 5), make_set(None, None, duration_seconds=60)) is None


class TestFindPreviousSet:

    def test_prefers_same_set_order(self):
        previous = [make_set(100, 5, set_order=1), make_set(110, 5, set_order=2)]
        assert find_previous_set(make_set(105, 5, set_order=2), previous).weight == 110

    def test_falls_back_to_most_recent_working_set(self):
        previous = [make_set(60, 10, set_order=1, is_warmup=True), make_set(100, 5, set_order=2)]
        assert find_previous_set(make_set(105, 5, set_order=4), previous).weight == 100

    def test_no_working_sets(self):
        assert find_previous_set(make_set(100, 5), [make_set(60, 10, is_warmup=True)]) is None
