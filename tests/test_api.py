"""Tests for the HTTP API."""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ecozync import crud, utils

ASSESSMENT = {
    "energy": {"heating_type": "renewable", "monthly_energy_cost": "50-100"},
    "transport": {"primary_transport": "bike_walk", "weekly_distance": "0-50", "annual_flights": "none"},
    "diet": {"diet_type": "vegan"},
    "lifestyle": {"shopping_frequency": "rarely", "waste_management": "compost_too"},
}

SAVED = {
    "calculation_date": "2024-05-01",
    "transport_emissions": 1000,
    "energy_emissions": 2000,
    "diet_emissions": 3300,
    "lifestyle_emissions": 600,
    "travel_emissions": 0,
    "other_emissions": 350,
    "calculation_confidence": 0.9,
}


def _signup(client, email="ada@example.com"):
    resp = client.post("/signup", json={
        "first_name": "Ada", "last_name": "Lovelace", "email": email, "password": "s3cret",
    })
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def token(client):
    return _signup(client)


class TestBasics:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_survey_questions(self, client):
        questions = client.get("/survey/questions").json()
        assert len(questions) == 8
        assert questions[0]["field"] == "heating_type"

    def test_factors(self, client):
        body = client.get("/factors").json()
        assert body["factors"]["transport"]["car_petrol_medium"]["factor"] == 0.192
        assert "defra" in body["sources"]


class TestAuth:
    def test_signup_and_login(self, client):
        _signup(client)
        resp = client.post("/login", json={"email": "ada@example.com", "password": "s3cret"})
        assert resp.status_code == 200
        assert resp.json()["first_name"] == "Ada"

    def test_duplicate_email(self, client):
        _signup(client)
        resp = client.post("/signup", json={
            "first_name": "A", "last_name": "L", "email": "ada@example.com", "password": "x",
        })
        assert resp.status_code == 400

    def test_bad_login(self, client):
        _signup(client)
        resp = client.post("/login", json={"email": "ada@example.com", "password": "wrong"})
        assert resp.status_code == 401

    def test_invalid_token(self, client):
        assert client.get("/calculations", params={"token": "nope"}).status_code == 401


class TestCalculate:
    def test_low_impact(self, client, low_impact_answers):
        resp = client.post("/calculate", json=low_impact_answers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["results"]["total_emissions"] == 1676
        assert body["results"]["calculation_method"] == "local_enhanced"
        assert body["impact"]["level"] == "Excellent"
        assert body["saved"] is False

    def test_high_impact(self, client, high_impact_answers):
        body = client.post("/calculate", json=high_impact_answers).json()
        assert body["impact"]["level"] == "Very High"
        assert body["comparisons"]["trees_to_offset"] == 767

    def test_unknown_categories_fall_back(self, client, low_impact_answers):
        answers = dict(low_impact_answers, diet_type="breatharian", primary_transport="car_alone",
                       fuel_type="steam", weekly_km=100)
        body = client.post("/calculate", json=answers).json()
        assert body["results"]["diet_emissions"] == 3300
        assert body["results"]["transport_emissions"] == 998

    def test_negative_distance_is_rejected(self, client, low_impact_answers):
        resp = client.post("/calculate", json=dict(low_impact_answers, weekly_km=-5))
        assert resp.status_code == 422

    @pytest.mark.parametrize("body", [
        '{"monthly_energy_bill": Infinity, "weekly_km": 0}',
        '{"monthly_energy_bill": NaN, "weekly_km": 0}',
        '{"monthly_energy_bill": 1e308, "weekly_km": 0}',
        '{"monthly_energy_bill": 100, "weekly_km": 1e308}',
    ])
    def test_non_finite_and_huge_numbers_are_rejected(self, client, body):
        resp = client.post("/calculate", content=body, headers={"Content-Type": "application/json"})
        assert resp.status_code == 422
        fields = {err["loc"][-1] for err in resp.json()["detail"]}
        assert fields & {"monthly_energy_bill", "weekly_km"}

    def test_both_paths_failing_returns_retry_message(self, client, monkeypatch, low_impact_answers):
        def broken(_):
            raise RuntimeError("boom")

        monkeypatch.setattr(utils, "calc_waste", broken)
        monkeypatch.setattr(utils, "calc_lifestyle_legacy", broken)
        resp = client.post("/calculate", json=low_impact_answers)
        assert resp.status_code == 500
        assert "try again" in resp.json()["detail"]


class TestAssessments:
    def test_anonymous_is_not_saved(self, client):
        body = client.post("/assessments", json=ASSESSMENT).json()
        # 75 * 12 / 0.25 = 3600 kWh at 0.020
        assert body["results"]["energy_emissions"] == 72
        assert body["results"]["total_emissions"] == 72 + 1200 + 300 + 80
        assert body["saved"] is False
        assert body["calculation_id"] is None

    def test_signed_in_saves_once_per_day(self, client, token):
        first = client.post("/assessments", json=ASSESSMENT, params={"token": token}).json()
        assert first["saved"] is True
        changed = dict(ASSESSMENT, diet={"diet_type": "omnivore"})
        second = client.post("/assessments", json=changed, params={"token": token}).json()
        assert second["calculation_id"] == first["calculation_id"]

        page = client.get("/calculations", params={"token": token}).json()
        assert page["count"] == 1
        saved = page["data"][0]
        assert saved["calculation_date"] == date.today().isoformat()
        assert saved["diet_emissions"] == 3300
        assert saved["assessment_data"]["diet"]["diet_type"] == "omnivore"
        assert saved["calculation_method"] == "local_enhanced"
        assert saved["calculation_confidence"] == 0.9

    def test_failed_save_still_returns_results(self, client, token, monkeypatch):
        def failing_upsert(*args, **kwargs):
            raise SQLAlchemyError("database is locked")

        monkeypatch.setattr(crud, "upsert_calculation", failing_upsert)
        resp = client.post("/assessments", json=ASSESSMENT, params={"token": token})
        assert resp.status_code == 200
        body = resp.json()
        assert body["saved"] is False
        assert body["calculation_id"] is None
        assert body["results"]["total_emissions"] == 72 + 1200 + 300 + 80
        assert body["impact"]["level"] == "Excellent"

    def test_empty_assessment_uses_defaults(self, client):
        body = client.post("/assessments", json={}).json()
        assert body["results"]["total_emissions"] == 2124 + 998 + 3300 + 600 + 350


class TestCalculations:
    def test_post_creates_then_updates(self, client, token):
        resp = client.post("/calculations", json=SAVED, params={"token": token})
        assert resp.status_code == 201
        assert resp.json()["total_emissions"] == 7250
        resp = client.post("/calculations", json=dict(SAVED, diet_emissions=1200), params={"token": token})
        assert resp.status_code == 200
        assert resp.json()["total_emissions"] == 5150

    def test_concurrent_save_for_same_day_updates(self, client, token, monkeypatch):
        real_upsert = crud.upsert_calculation
        calls = []

        def racing_upsert(db, user_id, day, values):
            calls.append(day)
            if len(calls) == 1:
                # a parallel request inserts the same day first
                real_upsert(db, user_id, day, dict(values, diet_emissions=1200))
                raise IntegrityError("INSERT INTO carbon_calculations", {}, Exception("UNIQUE constraint failed"))
            return real_upsert(db, user_id, day, values)

        monkeypatch.setattr(crud, "upsert_calculation", racing_upsert)
        resp = client.post("/calculations", json=SAVED, params={"token": token})
        assert resp.status_code == 200
        assert resp.json()["total_emissions"] == 7250
        assert len(calls) == 2
        assert client.get("/calculations", params={"token": token}).json()["count"] == 1

    def test_pagination_metadata(self, client, token):
        for day in range(1, 6):
            client.post("/calculations", json=dict(SAVED, calculation_date=f"2024-05-0{day}"),
                        params={"token": token})
        page = client.get("/calculations", params={"token": token, "page": 2, "page_size": 2}).json()
        assert page["count"] == 5
        assert page["total_pages"] == 3
        assert page["has_next"] is True
        assert page["has_previous"] is True
        assert [c["calculation_date"] for c in page["data"]] == ["2024-05-03", "2024-05-02"]

    def test_get_update_delete(self, client, token):
        calc_id = client.post("/calculations", json=SAVED, params={"token": token}).json()["id"]
        assert client.get(f"/calculations/{calc_id}", params={"token": token}).status_code == 200

        resp = client.put(f"/calculations/{calc_id}", json={"travel_emissions": 750}, params={"token": token})
        assert resp.status_code == 200
        assert resp.json()["total_emissions"] == 8000

        resp = client.delete(f"/calculations/{calc_id}", params={"token": token})
        assert resp.json() == {"message": "Calculation deleted successfully"}
        assert client.get(f"/calculations/{calc_id}", params={"token": token}).status_code == 404

    def test_other_users_cannot_see_calculation(self, client, token):
        calc_id = client.post("/calculations", json=SAVED, params={"token": token}).json()["id"]
        other = _signup(client, "alan@example.com")
        assert client.get(f"/calculations/{calc_id}", params={"token": other}).status_code == 404
        assert client.delete(f"/calculations/{calc_id}", params={"token": other}).status_code == 404

    def test_moving_to_a_taken_date_conflicts(self, client, token):
        client.post("/calculations", json=SAVED, params={"token": token})
        calc_id = client.post("/calculations", json=dict(SAVED, calculation_date="2024-05-02"),
                              params={"token": token}).json()["id"]
        resp = client.put(f"/calculations/{calc_id}", json={"calculation_date": "2024-05-01"},
                          params={"token": token})
        assert resp.status_code == 409

    def test_stats(self, client, token):
        empty = client.get("/calculations/stats", params={"token": token}).json()
        assert empty["total_calculations"] == 0
        client.post("/calculations", json=dict(SAVED, calculation_date=date.today().isoformat()),
                    params={"token": token})
        stats = client.get("/calculations/stats", params={"token": token}).json()
        assert stats["total_calculations"] == 1
        assert stats["avg_total_emissions"] == 7250
        assert stats["reduction_progress"] is None
        assert len(stats["monthly_trend"]) == 1
