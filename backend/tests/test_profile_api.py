from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ascend.db.deps import get_db
from ascend.db.models.storage_entry import StorageEntry
from ascend.db.models.user import User
from ascend.main import app
from ascend.services.profile_service import with_converted_height, with_converted_weight

VALID_PROFILE = {
    "age": 30,
    "sex": "male",
    "activityLevel": "moderate",
    "primaryGoal": "Lose fat",
    "injuriesOrConditions": "none",
    "availableEquipment": "dumbbells",
    "units": "metric",
    "heightCm": 180,
    "weightKg": 80,
}


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    User.__table__.create(bind=engine)
    StorageEntry.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def user_params():
    return {"user_id": str(uuid4())}


def test_default_profile_is_incomplete(client, user_params) -> None:
    response = client.get("/profile", params={**user_params, "locale": "en"})

    assert response.status_code == 200
    body = response.json()
    assert body["complete"] is False
    assert body["profile"]["age"] == 28
    assert body["profile"]["units"] == "metric"
    assert "Injuries/conditions field is required." in body["errors"]
    assert "Available equipment is required." in body["errors"]
    assert body["displayHeight"] == 175


def test_invalid_profile_is_rejected_with_localized_details(client, user_params) -> None:
    response = client.put(
        "/profile",
        params=user_params,
        json={**VALID_PROFILE, "age": 9, "availableEquipment": ""},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_PROFILE"
    assert body["details"] == ["العمر يجب أن يكون بين 13 و90.", "اكتب المعدات المتاحة."]


def test_wrong_types_are_rejected(client, user_params) -> None:
    response = client.put("/profile", params=user_params, json={**VALID_PROFILE, "sex": True})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PROFILE"
    assert response.json()["details"] == ["بعض حقول الملف الشخصي بنوع غير صالح."]

    english = client.put("/profile", params={**user_params, "locale": "en"}, json={**VALID_PROFILE, "sex": True})
    assert english.json()["details"] == ["Profile fields have invalid types."]


def test_valid_profile_round_trips(client, user_params) -> None:
    saved = client.put("/profile", params={**user_params, "locale": "en"}, json=VALID_PROFILE)
    assert saved.status_code == 200
    assert saved.json()["complete"] is True
    assert saved.json()["errors"] == []

    loaded = client.get("/profile", params=user_params).json()
    assert loaded["complete"] is True
    assert loaded["profile"]["primaryGoal"] == "Lose fat"
    assert loaded["profile"]["weightKg"] == 80


def test_imperial_display_values(client, user_params) -> None:
    profile = {**VALID_PROFILE, "units": "imperial", "heightCm": 180.34, "weightKg": 81.6}

    body = client.put("/profile", params=user_params, json=profile).json()

    assert body["displayHeight"] == 71.0
    assert body["displayWeight"] == 179.9


def test_profiles_are_isolated_per_user(client, user_params) -> None:
    client.put("/profile", params=user_params, json=VALID_PROFILE)

    other = client.get("/profile", params={"user_id": str(uuid4())}).json()

    assert other["complete"] is False


def test_pro_access_defaults_set_and_toggle(client, user_params) -> None:
    initial = client.get("/pro-access", params=user_params).json()
    assert initial == {"enabled": False, "mode": "none", "updatedAt": None}

    enabled = client.put("/pro-access", params=user_params, json={"enabled": True}).json()
    assert enabled["enabled"] is True
    assert enabled["mode"] == "demo"
    assert enabled["updatedAt"].endswith("Z")

    toggled = client.post("/pro-access/toggle", params=user_params).json()
    assert toggled["enabled"] is False
    assert toggled["mode"] == "none"
    assert client.get("/pro-access", params=user_params).json()["enabled"] is False


def test_planner_session_save_resume_and_clear(client, user_params) -> None:
    session = {
        "query": "Build muscle",
        "locale": "en",
        "durationDays": 42,
        "profile": VALID_PROFILE,
        "qaHistory": [{"questionId": "training_days_per_week", "value": "4", "label": "4 days"}],
    }

    saved = client.put("/planner/session", params=user_params, json=session)
    assert saved.status_code == 200
    assert saved.json()["qaHistory"] == session["qaHistory"]

    resumed = client.get("/planner/session", params=user_params).json()
    assert resumed["session"]["query"] == "Build muscle"
    assert resumed["session"]["durationDays"] == 42
    assert resumed["qaHistory"][0]["questionId"] == "training_days_per_week"

    assert client.delete("/planner/session", params=user_params).status_code == 204
    cleared = client.get("/planner/session", params=user_params).json()
    assert cleared == {"session": None, "qaHistory": []}


def test_planner_session_rejects_out_of_range_duration(client, user_params) -> None:
    session = {"query": "Build muscle", "durationDays": 120, "profile": VALID_PROFILE}

    response = client.put("/planner/session", params=user_params, json=session)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_BODY"


def test_display_values_convert_back_to_metric() -> None:
    imperial = {**VALID_PROFILE, "units": "imperial"}

    assert with_converted_height(imperial, 70)["heightCm"] == 177.8
    assert with_converted_weight(imperial, 176)["weightKg"] == 79.8
    assert with_converted_weight(VALID_PROFILE, 82.04)["weightKg"] == 82.0
