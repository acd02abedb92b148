from __future__ import annotations

from ascend.services.goal_alignment import enforce_goal_alignment
from ascend.services.protocol_context import build_generation_context
from ascend.services.protocol_fallback import build_fallback_protocol, build_progress_data, phase_index
from ascend.services.protocol_normalizer import (
    clean_text_list,
    normalize_protocol,
    normalize_task,
    sanitize_task,
    sanitize_tasks,
)
from ascend.services.planning_request import build_planning_context

PROFILE = {
    "age": 30,
    "sex": "male",
    "activityLevel": "moderate",
    "primaryGoal": "",
    "injuriesOrConditions": "none",
    "availableEquipment": "gym",
    "units": "metric",
    "heightCm": 180,
    "weightKg": 80,
}


def _context(query="Build muscle", days=7, profile=None, answers=None, plan_mode_enabled=True):
    planning = build_planning_context(
        query=query,
        locale="en",
        duration_days=days,
        profile=profile or dict(PROFILE),
        qa_history=answers or [],
        plan_mode_enabled=plan_mode_enabled,
    )
    return build_generation_context(planning)


def test_context_derivation() -> None:
    context = _context(
        query="Sprint faster",
        days=30,
        profile={**PROFILE, "activityLevel": "athlete", "injuriesOrConditions": "bad knee and lower back"},
        answers=[{"questionId": "daily_time_window", "value": "60_plus"}],
    )

    assert context.archetype == "speed"
    assert context.plan_mode == "weekly"
    assert context.period_count == 5
    assert context.training_days == 5
    assert context.session_minutes == 60
    assert context.base_sets == 4
    assert context.conditions == ("knee", "back")
    assert context.supplement_mode == "full"


def test_unknown_category_and_impact_are_repaired() -> None:
    task = sanitize_task({"action": "Cold plunge", "category": "magic", "visualImpact": "huge"}, _context())

    assert task["category"] == "recovery"
    assert task["visualImpact"] == "medium"


def test_supplements_dropped_for_minors() -> None:
    context = _context(profile={**PROFILE, "age": 15})

    assert sanitize_task({"action": "Creatine", "category": "supplement"}, context) is None


def test_minimal_supplements_keep_only_first() -> None:
    context = _context(answers=[{"questionId": "supplements_preference", "value": "minimal"}])
    tasks = [
        {"action": "Creatine", "category": "supplement", "visualImpact": "low"},
        {"action": "Whey", "category": "supplement", "visualImpact": "low"},
        {"action": "Bench press", "category": "training", "visualImpact": "high"},
    ]

    kept = sanitize_tasks(tasks, context, "d1")

    assert [task["action"] for task in kept] == ["Creatine", "Bench press"]
    assert [task["id"] for task in kept] == ["d1t1", "d1t2"]


def test_condition_downgrade_is_idempotent() -> None:
    context = _context(profile={**PROFILE, "injuriesOrConditions": "shoulder impingement"})
    raw = {"action": "Overhead press 5x5", "category": "training", "visualImpact": "high", "tips": "Brace."}

    once = sanitize_task(raw, context)
    twice = sanitize_task(once, context)

    assert once["visualImpact"] == "medium"
    assert once["tips"].startswith("Brace. Shoulder-friendly")
    assert twice == once


def test_unrelated_training_is_untouched_by_conditions() -> None:
    context = _context(profile={**PROFILE, "injuriesOrConditions": "shoulder impingement"})
    raw = {"action": "Leg curl 3x12", "category": "training", "visualImpact": "high"}

    assert sanitize_task(raw, context) == raw


def test_normalize_task_fills_languages_and_frequency() -> None:
    task = normalize_task({"actionAr": "مشي 30 دقيقة", "category": "recovery", "tips": " walk  fast "}, "w1t1", weekly=True)

    assert task["action"] == "مشي 30 دقيقة"
    assert task["actionAr"] == "مشي 30 دقيقة"
    assert task["tips"] == "walk fast"
    assert task["tipsAr"] == "walk fast"
    assert task["frequency"] == "Daily"
    assert task["scienceWhy"].startswith("Adaptation")
    assert normalize_task({"category": "meal"}, "w1t2", weekly=True) is None
    assert normalize_task("just text", "w1t3", weekly=False) is None


def test_clean_text_list_filters_and_caps() -> None:
    assert clean_text_list(["a", "", None, 3, "  b  c "]) == ["a", "3", "b c"]
    assert len(clean_text_list([str(index) for index in range(20)])) == 8
    assert clean_text_list("not a list") == []


def test_weekly_periods_match_by_number_then_position() -> None:
    context = _context(query="Lose fat", days=21)
    fallback = build_fallback_protocol(context)
    payload = {
        "weeks": [
            {"week": 3, "title": "Final push", "tasks": [{"action": "Track calorie deficit", "category": "meal"}]},
            {"title": "Unnumbered", "tasks": []},
            {"week": 9, "title": "Ignored"},
        ]
    }

    protocol = normalize_protocol(payload, fallback, context)

    assert [week["week"] for week in protocol["weeks"]] == [1, 2, 3]
    assert protocol["weeks"][0] == fallback["weeks"][0]
    assert protocol["weeks"][1]["title"] == "Unnumbered"
    assert protocol["weeks"][1]["tasks"] == fallback["weeks"][1]["tasks"]
    assert protocol["weeks"][2]["title"] == "Final push"
    assert protocol["weeks"][2]["tasks"][0]["frequency"] == "Daily"
    assert protocol["weeks"][2]["safetyNotes"] == fallback["weeks"][2]["safetyNotes"]


def test_identity_fields_always_come_from_fallback() -> None:
    context = _context(days=10, plan_mode_enabled=False)
    fallback = build_fallback_protocol(context)
    payload = {"id": "evil", "planMode": "weekly", "durationDays": 90, "progressData": [], "days": "nope"}

    protocol = normalize_protocol(payload, fallback, context)

    assert protocol["id"] == fallback["id"]
    assert protocol["planMode"] == "daily"
    assert protocol["durationDays"] == 10
    assert protocol["progressData"] == fallback["progressData"]
    assert protocol["days"] == fallback["days"]


def test_alignment_adds_goal_task_once() -> None:
    protocol = {
        "planMode": "daily",
        "days": [{"day": 1, "tasks": [{"id": "d1t1", "action": "Read a book", "category": "recovery"}]}],
    }

    aligned = enforce_goal_alignment(protocol, "posture_definition", allow_supplements=True)
    again = enforce_goal_alignment(aligned, "posture_definition", allow_supplements=True)

    assert len(protocol["days"][0]["tasks"]) == 1
    assert [task["id"] for task in aligned["days"][0]["tasks"]] == ["d1t1", "d1t2"]
    assert again == aligned


def test_alignment_adds_expected_supplement_only_when_allowed() -> None:
    protocol = {
        "planMode": "weekly",
        "weeks": [{"week": 1, "tasks": [{"id": "w1t1", "action": "High protein breakfast", "category": "meal"}]}],
    }

    with_supplement = enforce_goal_alignment(protocol, "muscle_gain", allow_supplements=True)
    without = enforce_goal_alignment(protocol, "muscle_gain", allow_supplements=False)

    added = with_supplement["weeks"][0]["tasks"][1]
    assert added["category"] == "supplement"
    assert added["id"] == "w1t2"
    assert added["frequency"] == "Daily"
    assert "cadence" not in added
    assert without["weeks"][0]["tasks"] == protocol["weeks"][0]["tasks"]


def test_progress_curve_and_phases() -> None:
    progress = build_progress_data(10)

    assert [point["impact"] for point in progress] == [19, 36, 51, 64, 75, 84, 91, 96, 99, 100]
    assert [phase_index(position, 7) for position in range(7)] == [0, 0, 0, 1, 1, 2, 2]


def test_required_safety_notes_survive_a_full_model_list() -> None:
    context = _context(profile={**PROFILE, "age": 16, "injuriesOrConditions": "knee pain"})
    fallback = build_fallback_protocol(context)
    payload = {"safetyNotesGlobal": [f"Model note {index}" for index in range(8)]}

    notes = normalize_protocol(payload, fallback, context)["safetyNotesGlobal"]

    assert len(notes) == 8
    assert notes[: 8 - len(fallback["safetyNotesGlobal"])] == [
        f"Model note {index}" for index in range(8 - len(fallback["safetyNotesGlobal"]))
    ]
    assert notes[-len(fallback["safetyNotesGlobal"]):] == fallback["safetyNotesGlobal"]
    assert any(note.startswith("Under 18") for note in notes)
    assert any(note.startswith("Knee-friendly") for note in notes)


def test_alignment_task_gets_condition_note() -> None:
    context = _context(query="Sprint faster", profile={**PROFILE, "injuriesOrConditions": "knee pain"})
    protocol = {
        "planMode": "daily",
        "days": [{"day": 1, "tasks": [{"id": "d1t1", "action": "Read a book", "category": "recovery"}]}],
    }

    aligned = enforce_goal_alignment(protocol, "speed", allow_supplements=False, context=context)
    added = aligned["days"][0]["tasks"][1]

    assert added["action"].startswith("Film one acceleration sprint")
    assert "Knee-friendly" in added["tips"]
    assert added["visualImpact"] != "high"
    assert enforce_goal_alignment(aligned, "speed", allow_supplements=False, context=context) == aligned
