from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from ascend.core.config import settings
from ascend.main import app
from ascend.observability import metrics
from ascend.services import llm_client
from ascend.services.goal_archetypes import matches_alignment

VALID_PROFILE = {
    "age": 30,
    "sex": "female",
    "activityLevel": "moderate",
    "primaryGoal": "",
    "injuriesOrConditions": "none",
    "availableEquipment": "gym",
    "units": "metric",
    "heightCm": 168,
    "weightKg": 70,
}


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setattr(settings, "deepseek_api_key", None)
    with TestClient(app) as test_client:
        yield test_client


def _body(**overrides):
    body = {
        "query": "Lose 5kg of body fat",
        "locale": "en",
        "durationDays": 30,
        "planModeEnabled": True,
        "profile": dict(VALID_PROFILE),
        "qaHistory": [],
    }
    body.update(overrides)
    return body


def _periods(protocol):
    return protocol.get("days") or protocol.get("weeks")


def _all_tasks(protocol):
    return [task for period in _periods(protocol) for task in period["tasks"]]


def _period_text(period):
    fields = ("action", "actionAr", "scienceWhy", "scienceWhyAr", "tips", "tipsAr")
    return " ".join(task.get(field, "") for task in period["tasks"] for field in fields)


def test_invalid_requests_return_codes(client) -> None:
    assert client.post("/api/generate", json=_body(query=None)).json()["code"] == "MISSING_QUERY"
    assert client.post("/api/generate", json=_body(durationDays=6)).json()["code"] == "INVALID_DURATION"
    response = client.post("/api/generate", json=_body(profile={"age": 30}))
    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_PROFILE"


def test_fat_loss_thirty_days_is_weekly(client) -> None:
    response = client.post("/api/generate", json=_body())

    assert response.status_code == 200
    protocol = response.json()
    assert protocol["planMode"] == "weekly"
    assert protocol["durationWeeks"] == 5
    assert protocol["title"] == "Precision Fat-Loss Protocol"
    assert len(protocol["weeks"]) == 5
    assert "days" not in protocol
    assert [week["week"] for week in protocol["weeks"]] == [1, 2, 3, 4, 5]
    assert len(protocol["progressData"]) == 30
    assert protocol["progressData"][-1] == {"day": 30, "impact": 100}
    assert all(task["frequency"] and task["frequencyAr"] for task in _all_tasks(protocol))
    assert protocol["weeks"][0]["tasks"][0]["id"] == "w1t1"


def test_plan_mode_disabled_or_short_duration_is_daily(client) -> None:
    disabled = client.post("/api/generate", json=_body(durationDays=10, planModeEnabled=False)).json()
    short = client.post("/api/generate", json=_body(durationDays=7)).json()

    assert disabled["planMode"] == "daily"
    assert [day["day"] for day in disabled["days"]] == list(range(1, 11))
    assert "weeks" not in disabled and "durationWeeks" not in disabled
    assert short["planMode"] == "daily"
    assert len(short["days"]) == 7
    assert disabled["days"][0]["tasks"][0]["id"] == "d1t1"


def test_fallback_is_deterministic(client) -> None:
    first = client.post("/api/generate", json=_body())
    second = client.post("/api/generate", json=_body())

    assert first.content == second.content
    assert first.json()["id"].startswith("protocol-")


def test_different_requests_get_different_ids(client) -> None:
    first = client.post("/api/generate", json=_body()).json()
    second = client.post("/api/generate", json=_body(durationDays=31)).json()

    assert first["id"] != second["id"]


def test_every_period_is_goal_aligned(client) -> None:
    for query in ("Lose fat", "Build muscle", "Visible veins", "Fix my posture", "Run faster", "Feel good"):
        protocol = client.post("/api/generate", json=_body(query=query, durationDays=14)).json()
        for period in _periods(protocol):
            assert matches_alignment(_period_text(period), protocol["archetype"]), (query, period["title"])


def test_minors_never_get_supplements(client) -> None:
    profile = {**VALID_PROFILE, "age": 16}
    protocol = client.post("/api/generate", json=_body(query="Build muscle", profile=profile)).json()

    assert all(task["category"] != "supplement" for task in _all_tasks(protocol))
    assert any("Under 18" in note for note in protocol["safetyNotesGlobal"])


def test_declined_supplements_are_removed(client) -> None:
    declined = client.post(
        "/api/generate",
        json=_body(query="Build muscle", qaHistory=[{"questionId": "supplements_preference", "value": "no"}]),
    ).json()
    default = client.post("/api/generate", json=_body(query="Build muscle")).json()

    assert all(task["category"] != "supplement" for task in _all_tasks(declined))
    for period in _periods(default):
        assert sum(1 for task in period["tasks"] if task["category"] == "supplement") == 1


def test_knee_condition_downgrades_impact_training(client) -> None:
    profile = {**VALID_PROFILE, "injuriesOrConditions": "left knee pain"}
    protocol = client.post(
        "/api/generate",
        json=_body(query="Sprint faster", durationDays=7, profile=profile),
    ).json()

    training = [task for task in _all_tasks(protocol) if task["category"] == "training"]
    assert training
    assert all(task["visualImpact"] != "high" for task in training)
    assert any("Knee-friendly" in task.get("tips", "") for task in training)
    assert any("knee" in note for note in protocol["safetyNotesGlobal"])


def test_answers_shape_the_fallback(client) -> None:
    answers = [
        {"questionId": "training_days_per_week", "value": "2"},
        {"questionId": "daily_time_window", "value": "20_30"},
        {"questionId": "nutrition_style", "value": "low_carb"},
    ]
    protocol = client.post("/api/generate", json=_body(qaHistory=answers)).json()

    assert protocol["priorityActions"][0] == "Train 2 days per week, about 25 minutes per session"
    assert len(protocol["qaSummary"]) == 3
    assert protocol["qaSummary"][2].endswith("Low Carb")
    training = [task for task in protocol["weeks"][0]["tasks"] if task["category"] == "training"]
    assert [task["frequency"] for task in training] == ["1x per week", "1x per week"]


def _muscle_payload():
    return {
        "title": "Hypertrophy Block",
        "titleAr": "مرحلة التضخيم",
        "focus": ["Chest", "", 5],
        "days": [
            {
                "day": 1,
                "title": "Push Day",
                "tasks": [
                    {"action": "Bench press 4x8", "category": "training", "visualImpact": "high"},
                    {"action": "Creatine 5 g", "category": "supplement"},
                    {"action": "Mystery", "category": "magic", "visualImpact": "extreme"},
                    {"category": "meal"},
                ],
            },
            {"title": "Positional", "tasks": "not a list"},
            {"day": "3", "title": "Legs", "tasks": [{"action": "Squat 5x5", "category": "training"}]},
            {"day": 42, "title": "Out of range"},
        ],
    }


def test_llm_payload_is_normalized_and_aligned(client, monkeypatch) -> None:
    body = _body(query="Build muscle", durationDays=7)
    fallback = client.post("/api/generate", json=body).json()

    monkeypatch.setattr(llm_client, "create_client", lambda: object())
    monkeypatch.setattr(
        llm_client,
        "complete",
        lambda *args, **kwargs: "Here you go:\n```json\n" + json.dumps(_muscle_payload()) + "\n```",
    )
    protocol = client.post("/api/generate", json=body).json()

    assert protocol["id"] == fallback["id"]
    assert protocol["title"] == "Hypertrophy Block"
    assert protocol["scienceOverview"] == fallback["scienceOverview"]
    assert protocol["focus"] == ["Chest", "5"]
    assert len(protocol["days"]) == 7

    day_one = protocol["days"][0]
    assert day_one["title"] == "Push Day"
    assert day_one["titleAr"] == "Push Day"
    assert [task["category"] for task in day_one["tasks"]] == ["training", "supplement", "recovery", "training"]
    assert day_one["tasks"][2]["visualImpact"] == "medium"
    assert [task["id"] for task in day_one["tasks"]] == ["d1t1", "d1t2", "d1t3", "d1t4"]
    assert "progressive overload" in day_one["tasks"][3]["action"]

    assert protocol["days"][1]["title"] == "Positional"
    assert protocol["days"][1]["tasks"] == fallback["days"][1]["tasks"]
    assert protocol["days"][2]["title"] == "Legs"
    assert protocol["days"][3:] == fallback["days"][3:]


def test_retry_after_timeout_uses_smaller_budget(client, monkeypatch) -> None:
    calls = []

    def fake_complete(client_obj, messages, *, max_tokens, temperature, timeout_s):
        calls.append((max_tokens, timeout_s))
        if len(calls) == 1:
            raise llm_client.AITimeoutError("slow")
        return json.dumps({"title": "Second Try"})

    monkeypatch.setattr(llm_client, "create_client", lambda: object())
    monkeypatch.setattr(llm_client, "complete", fake_complete)

    protocol = client.post("/api/generate", json=_body()).json()

    assert protocol["title"] == "Second Try"
    assert calls == [
        (8000, settings.generation_primary_timeout_s),
        (4000, settings.generation_retry_timeout_s),
    ]


def test_all_attempts_failing_returns_fallback(client, monkeypatch) -> None:
    fallback = client.post("/api/generate", json=_body()).json()
    replies = iter(["not json at all", "[1, 2, 3]"])

    monkeypatch.setattr(llm_client, "create_client", lambda: object())
    monkeypatch.setattr(llm_client, "complete", lambda *args, **kwargs: next(replies))

    response = client.post("/api/generate", json=_body())

    assert response.status_code == 200
    assert response.json() == fallback


def test_each_attempt_reports_latency(client, monkeypatch) -> None:
    recorded = []
    replies = iter(["not json at all", json.dumps({"title": "Second Try"})])

    monkeypatch.setattr(
        metrics, "log_metric", lambda name, value, metadata=None: recorded.append((name, value, metadata or {}))
    )
    monkeypatch.setattr(llm_client, "create_client", lambda: object())
    monkeypatch.setattr(llm_client, "complete", lambda *args, **kwargs: next(replies))

    assert client.post("/api/generate", json=_body()).json()["title"] == "Second Try"

    latency = [entry for entry in recorded if entry[0] == "protocol.generate.attempt.latency_ms"]
    assert [meta["attempt"] for _, _, meta in latency] == [1, 2]
    assert [meta["code"] for _, _, meta in latency] == ["INVALID_JSON", "ok"]
    assert all(value >= 0 for _, value, _ in latency)
