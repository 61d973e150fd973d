"""
API tests

The database session dependency is replaced and the repository functions
are patched, so every request runs against in-memory records.
"""

import pytest
from fastapi.testclient import TestClient

import repository
from builders import days_after, make_set, make_workout
from database import get_db
from main import app
from services.models import WorkoutContext


def fake_db():
    yield None


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(monkeypatch, bench):
    """Patch exercise lookup and history with a single bench press"""
    history = {'ex-bench': [make_set(100, 5, 8, workout_id='w-prev'),
                            make_set(100, 5, 8, workout_id='w-prev')]}

    monkeypatch.setattr(repository, 'get_exercise',
                        lambda db, exercise_id: bench if exercise_id == 'ex-bench' else None)
    monkeypatch.setattr(repository, 'get_exercise_history',
                        lambda db, exercise_id, limit=10, exclude_workout_id=None:
                        history.get(exercise_id, [])[:limit])
    return history


class TestInfo:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_lists_endpoints(self, client):
        endpoints = client.get("/").json()["endpoints"]
        assert set(endpoints) == {"records", "progression", "readiness", "sessions", "patterns"}


class TestRecords:

    def test_e1rm(self, client):
        body = client.get("/records/e1rm", params={"weight": 145, "reps": 5}).json()
        assert body["estimated_1rm"] == 169

    def test_e1rm_single_is_the_weight(self, client):
        body = client.get("/records/e1rm", params={"weight": 200, "reps": 1}).json()
        assert body["estimated_1rm"] == 200

    def test_e1rm_rejects_zero_weight(self, client):
        assert client.get("/records/e1rm", params={"weight": 0, "reps": 5}).status_code == 422

    def test_weight_pr(self, client, catalog):
        response = client.post("/records/check", json={
            "exercise_id": "ex-bench", "weight": 105, "reps": 3, "workout_id": "w-now"
        })
        body = response.json()

        assert response.status_code == 200
        assert body["is_pr"] is True
        assert body["record"]["record_type"] == "weight"
        assert body["historical_best"]["max_weight"] == 100

    def test_not_a_pr(self, client, catalog):
        body = client.post("/records/check", json={
            "exercise_id": "ex-bench", "weight": 95, "reps": 5
        }).json()

        assert body["is_pr"] is False
        assert body["record"] is None

    def test_unknown_exercise(self, client, catalog):
        response = client.post("/records/check", json={
            "exercise_id": "missing", "weight": 100, "reps": 5
        })
        assert response.status_code == 404


class TestProgression:

    def test_suggestion(self, client, catalog):
        catalog['ex-bench'] = [make_set(185, 5, 7.5), make_set(185, 5, 8)]
        body = client.get("/progression/ex-bench").json()

        assert body["status"] == "ok"
        assert body["suggestion"]["action"] == "increase_weight"
        assert body["suggestion"]["target_weight"] == 190

    def test_no_suggestion(self, client, catalog):
        catalog['ex-bench'] = [make_set(185, 5, 7.5)]
        body = client.get("/progression/ex-bench").json()

        assert body["status"] == "no_suggestion"
        assert body["sets_found"] == 1

    def test_unknown_exercise(self, client, catalog):
        assert client.get("/progression/missing").status_code == 404


class TestReadiness:

    def test_assess(self, client):
        body = client.post("/readiness/assess", json={
            "sleep_quality": 5, "muscle_soreness": 2, "stress_level": 2
        }).json()

        assert body["status"] == "ok"
        assert body["assessment"]["score"] == 88
        assert body["decision"] == {"source": "computed", "level": "full", "suggested": "full"}
        assert body["multipliers"]["intensity"] == 1.0

    @pytest.mark.parametrize("payload", [
        {"sleep_quality": 5, "muscle_soreness": 2},
        {"sleep_quality": 9, "muscle_soreness": 2, "stress_level": 2},
    ])
    def test_no_assessment(self, client, payload):
        response = client.post("/readiness/assess", json=payload)

        assert response.status_code == 200
        assert response.json()["status"] == "no_assessment"

    def test_override(self, client):
        body = client.post("/readiness/assess", json={
            "sleep_quality": 1, "muscle_soreness": 5, "stress_level": 5, "override": "full"
        }).json()

        assert body["decision"] == {"source": "overridden", "level": "full", "suggested": "rest"}
        assert body["assessment"]["level"] == "rest"

    def test_adjust(self, client):
        planned = [
            {"exercise_id": "ex-bench", "set_order": i, "target_load": 200,
             "target_reps": 5, "target_rpe": 8}
            for i in range(1, 4)
        ]
        body = client.post("/readiness/adjust", json={
            "sleep_quality": 3, "muscle_soreness": 3, "stress_level": 3,
            "planned_sets": planned
        }).json()

        assert body["decision"]["level"] == "reduced"
        assert [s["target_load"] for s in body["planned_sets"]] == [170, 170]
        assert all(s["original_load"] == 200 for s in body["planned_sets"])


class TestSessions:

    @pytest.fixture
    def stored(self, monkeypatch):
        workouts = {}
        monkeypatch.setattr(repository, 'get_workout', lambda db, workout_id: workouts.get(workout_id))
        monkeypatch.setattr(repository, 'get_histories',
                            lambda db, exercise_ids, limit=30, exclude_workout_id=None, before=None: {})
        monkeypatch.setattr(repository, 'count_prior_block_sessions',
                            lambda db, block_id, before: 1 if block_id else 0)
        return workouts

    def test_deload_is_recovery(self, client, stored, bench, monday):
        stored['w1'] = make_workout('w1', [(bench, [make_set(70, 5)])], completed=monday,
                                    context=WorkoutContext.DELOADING)
        body = client.get("/sessions/w1/evaluation").json()

        assert body["verdict"] == "recovery"
        assert body["label"] == "RECOVERY"

    def test_new_block_is_labelled_calibrating(self, client, stored, bench, monday):
        stored['w1'] = make_workout('w1', [(bench, [make_set(100, 5)])], completed=monday,
                                    block_id='block-1')
        body = client.get("/sessions/w1/evaluation").json()

        assert body["verdict"] == "junk"
        assert body["calibrating"] is True
        assert body["label"] == "CALIBRATING"

    def test_history_stops_at_the_evaluated_workout(self, client, stored, monkeypatch, bench, monday):
        requests = []

        def histories(db, exercise_ids, limit=30, exclude_workout_id=None, before=None):
            requests.append({'exclude_workout_id': exclude_workout_id, 'before': before})
            return {'ex-bench': [make_set(100, 5, workout_id='w-earlier')]}

        monkeypatch.setattr(repository, 'get_histories', histories)
        completed = days_after(monday, 2)
        stored['w1'] = make_workout('w1', [(bench, [make_set(100, 5)])], completed=completed)

        body = client.get("/sessions/w1/evaluation").json()

        assert requests == [{'exclude_workout_id': 'w1', 'before': completed}]
        assert body["verdict"] == "maintaining"

    def test_unknown_workout(self, client, stored):
        assert client.get("/sessions/missing/evaluation").status_code == 404

    def test_incomplete_workout(self, client, stored, bench):
        stored['w1'] = make_workout('w1', [(bench, [])])
        assert client.get("/sessions/w1/evaluation").status_code == 400


class TestPatterns:

    def test_not_enough_data(self, client, monkeypatch):
        monkeypatch.setattr(repository, 'get_completed_workouts', lambda db, weeks=8: [])
        body = client.get("/patterns").json()

        assert body["status"] == "not_enough_data"
        assert body["patterns"] == []

    def test_patterns(self, client, monkeypatch, bench, squat, monday):
        workouts = [
            make_workout(f"w{i}", [(bench, [make_set(100, 5)]), (squat, [make_set(200, 5)])],
                         completed=days_after(monday, i * 7))
            for i in range(4)
        ]
        monkeypatch.setattr(repository, 'get_completed_workouts', lambda db, weeks=8: workouts)
        body = client.get("/patterns", params={"weeks": 4}).json()

        assert body["status"] == "ok"
        types = {p["type"] for p in body["patterns"]}
        assert "training_day" in types
