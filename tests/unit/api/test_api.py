"""
Unit tests for the HTTP surface.

Requests go through FastAPI's TestClient; bodies are plain JSON.
"""

import math

import pytest
from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

SQUAT = {
    "id": "squat",
    "name": "Squat",
    "type": "compound_lower",
    "axial": False,
    "prim": ["Quads"],
}
CURL = {"id": "curl", "name": "Curl", "type": "isolation_upper", "prim": ["Biceps"]}


# ======================================================================
# Helpers
# ======================================================================


def _record(date: str, weight: float = 100, reps: int = 5, rir: float = 2, exercise=SQUAT) -> dict:
    return {
        "exercise": exercise,
        "date": date,
        "sets": [{"weight": weight, "reps": reps, "rir": rir}],
    }


# ======================================================================
# Meta endpoints
# ======================================================================


class TestMeta:

    @pytest.mark.parametrize("path", ["/", "/health", "/info"])
    def test_ok(self, path):
        assert client.get(path).status_code == 200

    def test_health(self):
        assert client.get("/health").json()["status"] == "healthy"


# ======================================================================
# Fatigue
# ======================================================================


class TestFatigueEndpoints:

    def test_fold_from_empty_state(self):
        resp = client.post("/api/v1/fatigue/fold", json={
            "session": {"date": "2026-03-02", "exercises": [_record("2026-03-02")]},
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["local_fatigue"]["Quads"] == pytest.approx(0.5)
        assert body["systemic_fatigue"] == pytest.approx(0.05)
        assert body["muscle_readiness"]["Quads"] == pytest.approx(math.exp(-0.5))
        assert body["last_session_date"] == "2026-03-02"

    def test_recover(self):
        resp = client.post("/api/v1/fatigue/recover", json={
            "state": {"local_fatigue": {"Quads": 1.0}, "last_session_date": "2026-03-02"},
            "as_of": "2026-03-16",
        })
        assert resp.status_code == 200
        assert resp.json()["local_fatigue"]["Quads"] == pytest.approx(math.exp(-0.18 * 14))

    def test_replay_with_projection(self):
        resp = client.post("/api/v1/fatigue/replay", json={
            "history": [_record("2026-03-04"), _record("2026-03-02")],
            "ratings": {"2026-03-04": {"perceived_fatigue": 7}},
            "as_of": "2026-03-05",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["last_session_date"] == "2026-03-04"
        assert body["local_fatigue"]["Quads"] < 1.0

    def test_invalid_set_rejected(self):
        resp = client.post("/api/v1/fatigue/fold", json={
            "session": {"date": "2026-03-02", "exercises": [_record("2026-03-02", reps=-1)]},
        })
        assert resp.status_code == 422

    def test_rest_for_planned_session(self):
        resp = client.post("/api/v1/fatigue/rest", json={
            "muscle_readiness": {"Quads": 0.5},
            "systemic_readiness": 0.9,
            "next_exercises": [SQUAT],
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["recommend_rest"] is True
        assert body["min_rest_days"] == 1
        assert body["affected_muscles"] == {"Quads": 0.5}


# ======================================================================
# Progression
# ======================================================================


class TestProgressionEndpoint:

    def _advise(self, **overrides) -> dict:
        body = {
            "exercise_id": "squat",
            "exercises": [SQUAT, CURL],
            "history": [_record("2026-03-02", reps=5, rir=1), _record("2026-03-05", reps=6, rir=0)],
            "muscle_readiness": {"Quads": 0.9},
            "systemic_readiness": 0.9,
        }
        body.update(overrides)
        resp = client.post("/api/v1/progression/advise", json=body)
        assert resp.status_code == 200
        return resp.json()

    def test_progress(self):
        body = self._advise()
        assert body["advice"] == "progress"
        assert body["recommended_weight"] == pytest.approx(105.0)

    def test_deload(self):
        body = self._advise(systemic_readiness=0.5)
        assert body["advice"] == "deload"
        assert body["reason"] == "systemic fatigue high"
        assert body["deload_protocol"] is not None

    def test_first_time(self):
        assert self._advise(exercise_id="curl")["advice"] == "first_time"

    def test_unknown(self):
        assert self._advise(exercise_id="nope")["advice"] == "error"

    def test_out_of_range_readiness_rejected(self):
        resp = client.post("/api/v1/progression/advise", json={
            "exercise_id": "squat", "exercises": [SQUAT], "muscle_readiness": {"Quads": 0.0},
        })
        assert resp.status_code == 422

    def test_stagnation(self):
        resp = client.post("/api/v1/progression/stagnation", json={
            "exercise": SQUAT,
            "history": [_record(d) for d in ("2026-03-02", "2026-03-05", "2026-03-09")],
            "muscle_readiness": {"Quads": 0.9},
        })
        assert resp.status_code == 200
        assert resp.json()["recommendation"] == "add_volume"


# ======================================================================
# Analytics
# ======================================================================


class TestAnalyticsEndpoints:

    HISTORY = [
        _record("2026-03-02", reps=10),
        _record("2026-03-04", reps=11),
        _record("2026-03-06", reps=12),
        _record("2026-03-04", weight=15, reps=12, exercise=CURL),
    ]

    def _post(self, path: str, **extra) -> dict:
        resp = client.post(
            f"/api/v1/analytics/{path}",
            json={"history": self.HISTORY, "as_of": "2026-03-06", **extra},
        )
        assert resp.status_code == 200
        return resp.json()

    def test_weekly_summary(self):
        body = self._post("weekly-summary")
        assert body["start_date"] == "2026-03-01"
        assert body["total_volume"] == pytest.approx(1000 + 1100 + 1200 + 180)

    def test_volume_trend(self):
        body = self._post("volume-trend", weeks=2)
        assert len(body) == 2
        assert body[0]["volume"] == 0

    def test_overload_filters_exercise(self):
        body = self._post("overload", exercise_id="squat")
        assert body["trend"] == "increasing"
        assert body["session_count"] == 3

    def test_records(self):
        body = self._post("records", exercise_id="squat")
        assert body["max_volume"]["volume"] == pytest.approx(1200)

    def test_consistency(self):
        body = self._post("consistency", days=6)
        assert body["workout_days"] == 3
        assert body["score"] == 100

    def test_compare(self):
        body = self._post("compare")
        assert body["previous"]["volume"] == 0
        assert body["change"]["trend"] == "stable"
