from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ascend.main import app
from ascend.services.planner_questions import build_profile_fit_summary
from ascend.services.planning_request import js_round

VALID_PROFILE = {
    "age": 30,
    "sex": "male",
    "activityLevel": "moderate",
    "primaryGoal": "",
    "injuriesOrConditions": "none",
    "availableEquipment": "dumbbells",
    "units": "metric",
    "heightCm": 180,
    "weightKg": 80,
}


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


def _body(**overrides):
    body = {
        "query": "Lose 5kg of body fat",
        "locale": "en",
        "durationDays": 30,
        "profile": dict(VALID_PROFILE),
        "qaHistory": [],
    }
    body.update(overrides)
    return body


def test_validation_codes_follow_field_order(client) -> None:
    missing_query = client.post("/api/planner/questions", json=_body(query="", durationDays=3, profile=None))
    assert missing_query.status_code == 400
    assert missing_query.json()["code"] == "MISSING_QUERY"

    bad_duration = client.post("/api/planner/questions", json=_body(durationDays=91, profile=None))
    assert bad_duration.json()["code"] == "INVALID_DURATION"

    bad_profile = client.post("/api/planner/questions", json=_body(profile={**VALID_PROFILE, "age": 8}))
    assert bad_profile.json()["code"] == "MISSING_PROFILE"


def test_malformed_body_is_rejected(client) -> None:
    response = client.post("/api/planner/questions", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body", "code": "INVALID_BODY"}


def test_first_question_is_training_days(client) -> None:
    body = client.post("/api/planner/questions", json=_body()).json()

    assert body["status"] == "ask"
    assert body["progress"] == 0
    assert body["nextQuestion"]["id"] == "training_days_per_week"
    assert body["nextQuestion"]["questionAr"]
    assert [option["value"] for option in body["nextQuestion"]["options"]] == ["2", "3", "4", "5_plus"]


def test_goal_specific_third_question(client) -> None:
    answered = [
        {"questionId": "training_days_per_week", "value": "4"},
        {"questionId": "daily_time_window", "value": "45_60"},
    ]
    fat_loss = client.post("/api/planner/questions", json=_body(qaHistory=answered)).json()
    muscle = client.post("/api/planner/questions", json=_body(query="Build muscle", qaHistory=answered)).json()
    speed = client.post("/api/planner/questions", json=_body(query="Sprint faster", qaHistory=answered)).json()

    assert fat_loss["progress"] == 67
    assert fat_loss["nextQuestion"]["id"] == "nutrition_style"
    assert muscle["nextQuestion"]["id"] == "supplements_preference"
    assert speed["nextQuestion"]["id"] == "sprint_surface"


def test_ready_after_three_answers(client) -> None:
    answered = [
        {"questionId": "training_days_per_week", "value": "4", "label": "4 days"},
        {"questionId": "daily_time_window", "value": "45_60"},
        {"questionId": "nutrition_style", "value": "high_protein"},
        {"questionId": 7, "value": "ignored"},
    ]
    body = client.post("/api/planner/questions", json=_body(qaHistory=answered)).json()

    assert body["status"] == "ready"
    assert body["progress"] == 100
    assert "30-day" in body["planBrief"]
    assert len(body["keyConstraints"]) <= 6
    assert "training_days_per_week: 4 days" in body["keyConstraints"]
    assert "80 kg" in body["profileFitSummary"]


def test_ready_summary_in_arabic_and_duration_string(client) -> None:
    answered = [
        {"questionId": "training_days_per_week", "value": "3"},
        {"questionId": "daily_time_window", "value": "30_45"},
        {"questionId": "nutrition_style", "value": "balanced"},
    ]
    body = client.post(
        "/api/planner/questions",
        json=_body(locale="ar", durationDays="21", qaHistory=answered),
    ).json()

    assert body["status"] == "ready"
    assert "21 يوم" in body["planBrief"]


def test_profile_fit_summary_rounds_weight_half_up() -> None:
    summary = build_profile_fit_summary({**VALID_PROFILE, "weightKg": 72.5}, "en")

    assert "weight 73 kg" in summary
    assert "الوزن 73 كجم" in build_profile_fit_summary({**VALID_PROFILE, "weightKg": 72.5}, "ar")
    assert [js_round(value) for value in (0.5, 1.5, 2.5, 2.4)] == [1, 2, 3, 2]
