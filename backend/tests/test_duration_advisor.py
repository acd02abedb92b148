from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from ascend.core.config import settings
from ascend.main import app
from ascend.services import duration_advisor, llm_client


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setattr(settings, "deepseek_api_key", None)
    with TestClient(app) as test_client:
        yield test_client


def test_deterministic_suggestion_uses_goal_fallback() -> None:
    suggestion = duration_advisor.build_deterministic_suggestion("Lose fat", "en")

    assert suggestion["goal_type"] == "fat_loss"
    assert suggestion["suggested_days"] == 45
    assert (suggestion["min_days"], suggestion["max_days"]) == (21, 90)
    assert suggestion["quick_options"] == [36, 45, 56]
    assert suggestion["plan_mode_hint"] == "weekly"


def test_deterministic_suggestion_respects_explicit_duration() -> None:
    suggestion = duration_advisor.build_deterministic_suggestion("veins in 10 days", "en")

    assert suggestion["goal_type"] == "quick_visual"
    assert suggestion["suggested_days"] == 10
    assert suggestion["quick_options"] == [8, 10, 13]


def test_urgency_shortens_and_window_clamps() -> None:
    assert duration_advisor.build_deterministic_suggestion("build muscle fast", "en")["suggested_days"] == 56
    # 2 days requested, but muscle gain never goes below its window minimum.
    assert duration_advisor.build_deterministic_suggestion("muscle in 2 days", "en")["suggested_days"] == 42


def test_complexity_adds_days_for_mixed_goals() -> None:
    assert duration_advisor.estimate_complexity_adjustment("fat and muscle") == 3
    assert duration_advisor.estimate_complexity_adjustment("fat, muscle and neck posture") == 7
    assert duration_advisor.estimate_complexity_adjustment("fat") == 0


def test_arabic_rationale_and_question() -> None:
    suggestion = duration_advisor.build_deterministic_suggestion("خسارة دهون", "ar")

    assert suggestion["rationale"] == duration_advisor.RATIONALE_AR["fat_loss"]
    assert "45" in suggestion["question"]


def test_normalize_suggestion_clamps_to_new_goal_window() -> None:
    fallback = duration_advisor.build_deterministic_suggestion("Lose fat", "en")
    refined = duration_advisor.normalize_suggestion(
        {"goalType": "muscle_gain", "suggestedDays": 30, "rationale": "Muscle takes time", "question": ""},
        fallback,
        "en",
    )

    assert refined["goal_type"] == "muscle_gain"
    assert refined["suggested_days"] == 42
    assert refined["rationale"] == "Muscle takes time"
    assert "42 days" in refined["question"]


def test_normalize_suggestion_keeps_fallback_for_invalid_fields() -> None:
    fallback = duration_advisor.build_deterministic_suggestion("Lose fat", "en")
    refined = duration_advisor.normalize_suggestion({"goalType": "???", "suggestedDays": "soon"}, fallback, "en")

    assert refined["goal_type"] == "fat_loss"
    assert refined["suggested_days"] == 45
    assert refined["rationale"] == duration_advisor.RATIONALE_EN["fat_loss"]


def test_route_requires_query(client) -> None:
    response = client.post("/api/suggest-duration", json={"query": "   ", "locale": "en"})

    assert response.status_code == 400
    assert response.json() == {"error": "Query is required.", "code": "MISSING_QUERY"}


def test_route_returns_camel_case_without_llm(client) -> None:
    response = client.post("/api/suggest-duration", json={"query": "Lose fat", "locale": "en"})

    assert response.status_code == 200
    body = response.json()
    assert body["suggestedDays"] == 45
    assert body["goalType"] == "fat_loss"
    assert body["planModeHint"] == "weekly"
    assert body["quickOptions"] == [36, 45, 56]


def test_route_uses_llm_refinement(client, monkeypatch) -> None:
    calls = []

    def fake_complete(client_obj, messages, *, max_tokens, temperature, timeout_s):
        calls.append({"max_tokens": max_tokens, "timeout_s": timeout_s})
        return "```json\n" + json.dumps({"goalType": "fat_loss", "suggestedDays": 60.4, "rationale": "Go steady"}) + "\n```"

    monkeypatch.setattr(llm_client, "create_client", lambda: object())
    monkeypatch.setattr(llm_client, "complete", fake_complete)

    body = client.post("/api/suggest-duration", json={"query": "Lose fat", "locale": "en"}).json()

    assert body["suggestedDays"] == 60
    assert body["rationale"] == "Go steady"
    assert calls == [{"max_tokens": 260, "timeout_s": settings.duration_advisor_timeout_s}]


def test_route_falls_back_on_timeout(client, monkeypatch) -> None:
    def fake_complete(*args, **kwargs):
        raise llm_client.AITimeoutError("too slow")

    monkeypatch.setattr(llm_client, "create_client", lambda: object())
    monkeypatch.setattr(llm_client, "complete", fake_complete)

    body = client.post("/api/suggest-duration", json={"query": "Lose fat", "locale": "en"}).json()

    assert body["suggestedDays"] == 45
    assert body["rationale"] == duration_advisor.RATIONALE_EN["fat_loss"]
