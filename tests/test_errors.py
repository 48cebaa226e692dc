"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from interpret_reflect.core.errors import ComplexityNotFoundError, InterpretReflectError


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_complexity_not_found_error(self):
        err = ComplexityNotFoundError("asg-404")
        assert err.http_status == 404
        assert err.code == "COMPLEXITY_NOT_FOUND"
        assert "asg-404" in err.message
        d = err.to_dict()
        assert d["code"] == "COMPLEXITY_NOT_FOUND"
        assert d["details"]["assignment_id"] == "asg-404"

    def test_base_error_defaults(self):
        err = InterpretReflectError("boom")
        assert err.http_status == 500
        assert err.code == "INTERNAL_ERROR"

    def test_to_dict_without_details(self):
        d = InterpretReflectError("boom").to_dict()
        assert d == {"code": "INTERNAL_ERROR", "message": "boom"}


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestValidationErrors:
    def test_intensity_out_of_range(self, client):
        r = client.post("/events/u1/emotions", json={
            "emotion": "stressed", "intensity": 6, "timestamp": "2026-10-19T09:00:00Z",
        })
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert "intensity" in fields

    def test_unknown_difficulty(self, client):
        r = client.post("/events/u1/assignments", json={
            "type": "medical", "duration": 60, "difficulty": "impossible",
            "timestamp": "2026-10-19T09:00:00Z",
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_domain(self, client):
        r = client.post("/cognitive/complexity", json={
            "assignment_id": "asg-1", "type": "medical", "duration": 60,
            "domain": "astrophysics", "stakes_level": "high", "time_pressure": "normal",
        })
        assert r.status_code == 422

    def test_routing_needs_at_least_one_interpreter(self, client):
        r = client.post("/cognitive/routing", json={"assignment_id": "asg-1", "interpreter_ids": []})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_routing_interpreter_cap(self, client):
        ids = [f"terp-{i}" for i in range(101)]
        r = client.post("/cognitive/routing", json={"assignment_id": "asg-1", "interpreter_ids": ids})
        assert r.status_code == 422

    def test_outcome_stress_out_of_range(self, client):
        r = client.post("/cognitive/outcomes", json={
            "user_id": "u1", "assignment_id": "asg-1", "actual_performance": 80,
            "actual_error_rate": 0.1, "actual_recovery_time": 20,
            "stress_level": 11, "difficulty_rating": 5,
        })
        assert r.status_code == 422


class TestDomainErrors:
    def test_routing_unscored_assignment(self, client):
        r = client.post("/cognitive/routing", json={
            "assignment_id": "asg-ghost", "interpreter_ids": ["terp-1"],
        })
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "COMPLEXITY_NOT_FOUND"
        assert body["details"]["assignment_id"] == "asg-ghost"
