"""Repair layer that turns untrusted model JSON into a complete, safe protocol."""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from ascend.services.protocol_context import CONDITION_RULES, GenerationContext

logger = logging.getLogger(__name__)

TASK_CATEGORIES = ("wake", "meal", "supplement", "training", "recovery", "hydration", "sleep")
VISUAL_IMPACTS = ("low", "medium", "high")

MAX_TEXT_LENGTH = 600
MAX_LIST_ITEMS = 8
MAX_TASKS_PER_PERIOD = 12

_DEFAULT_WHY = {
    "wake": ("A consistent wake time stabilizes energy through the day.", "الاستيقاظ في وقت ثابت يثبت الطاقة خلال اليوم."),
    "meal": ("Meal quality drives recovery and body composition.", "جودة الوجبات تحدد التعافي وتكوين الجسم."),
    "supplement": ("Fills a specific gap that food alone may not cover.", "يسد نقصًا محددًا قد لا يغطيه الطعام وحده."),
    "training": ("Training is the stimulus the body adapts to.", "التمرين هو المحفز الذي يتكيف معه الجسم."),
    "recovery": ("Adaptation happens during recovery, not during the session.", "التكيف يحدث أثناء التعافي وليس أثناء الجلسة."),
    "hydration": ("Hydration supports performance and appearance.", "الترطيب يدعم الأداء والمظهر."),
    "sleep": ("Sleep is when repair hormones peak.", "النوم هو وقت ذروة هرمونات الإصلاح."),
}

_DEFAULT_FREQUENCY = ("Daily", "يوميًا")


def clean_text(value: Any, limit: int = MAX_TEXT_LENGTH) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return ""
    return " ".join(value.split())[:limit]


def clean_text_list(value: Any, limit: int = MAX_LIST_ITEMS) -> List[str]:
    if not isinstance(value, list):
        return []
    items = [clean_text(item) for item in value]
    return [item for item in items if item][:limit]


def _text_or(value: Any, default: str) -> str:
    return clean_text(value) or default


def _list_or(value: Any, default: List[str]) -> List[str]:
    return clean_text_list(value) or list(default)


def _period_number(entry: Any, key: str) -> Optional[int]:
    if not isinstance(entry, dict):
        return None
    value = entry.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and float(value).is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def sanitize_task(task: Dict[str, Any], context: GenerationContext) -> Optional[Dict[str, Any]]:
    """
    Apply profile safety rules to a single task.

    Returns None when the task must be dropped (supplements for minors or for
    users who declined them). Joint-loading training is downgraded from high
    impact and annotated with a modification. Running it twice is a no-op.
    """
    sanitized = dict(task)
    if sanitized.get("category") not in TASK_CATEGORIES:
        sanitized["category"] = "recovery"
    if sanitized.get("visualImpact") not in VISUAL_IMPACTS:
        sanitized["visualImpact"] = "medium"

    if sanitized["category"] == "supplement" and not context.allow_supplements:
        return None

    if sanitized["category"] == "training":
        text = " ".join(str(sanitized.get(key) or "") for key in ("action", "actionAr"))
        for name in context.conditions:
            rule = CONDITION_RULES[name]
            if not rule["load"].search(text):
                continue
            if sanitized["visualImpact"] == "high":
                sanitized["visualImpact"] = "medium"
            sanitized["tips"] = _append_note(sanitized.get("tips"), rule["note"])
            sanitized["tipsAr"] = _append_note(sanitized.get("tipsAr"), rule["note_ar"])
    return sanitized


def _append_note(existing: Any, note: str) -> str:
    current = existing if isinstance(existing, str) else ""
    if note in current:
        return current
    return f"{current} {note}".strip()


def normalize_task(
    raw: Any,
    task_id: str,
    *,
    weekly: bool,
) -> Optional[Dict[str, Any]]:
    """Coerce one model task into the TaskPoint/WeekTask shape; None if it has no action."""
    if not isinstance(raw, dict):
        return None
    action = clean_text(raw.get("action"))
    action_ar = clean_text(raw.get("actionAr"))
    if not action and not action_ar:
        return None

    category = raw.get("category") if raw.get("category") in TASK_CATEGORIES else "recovery"
    why_en, why_ar = _DEFAULT_WHY[category]
    science_why = clean_text(raw.get("scienceWhy"))
    science_why_ar = clean_text(raw.get("scienceWhyAr"))
    task: Dict[str, Any] = {
        "id": task_id,
        "action": action or action_ar,
        "actionAr": action_ar or action,
        "category": category,
        "scienceWhy": science_why or science_why_ar or why_en,
        "scienceWhyAr": science_why_ar or science_why or why_ar,
        "visualImpact": raw.get("visualImpact") if raw.get("visualImpact") in VISUAL_IMPACTS else "medium",
    }
    tips = clean_text(raw.get("tips"))
    tips_ar = clean_text(raw.get("tipsAr"))
    if tips or tips_ar:
        task["tips"] = tips or tips_ar
        task["tipsAr"] = tips_ar or tips
    image = clean_text(raw.get("exerciseImage"), limit=300)
    if image:
        task["exerciseImage"] = image
    if weekly:
        frequency = clean_text(raw.get("frequency"), limit=80)
        frequency_ar = clean_text(raw.get("frequencyAr"), limit=80)
        task["frequency"] = frequency or frequency_ar or _DEFAULT_FREQUENCY[0]
        task["frequencyAr"] = frequency_ar or frequency or _DEFAULT_FREQUENCY[1]
    return task


def sanitize_tasks(tasks: List[Dict[str, Any]], context: GenerationContext, prefix: str) -> List[Dict[str, Any]]:
    """Sanitize a period's tasks, cap supplements for "minimal" users and renumber ids."""
    kept: List[Dict[str, Any]] = []
    supplements = 0
    for task in tasks:
        sanitized = sanitize_task(task, context)
        if sanitized is None:
            continue
        if sanitized["category"] == "supplement":
            supplements += 1
            if context.supplement_mode == "minimal" and supplements > 1:
                continue
        kept.append(sanitized)
    for index, task in enumerate(kept[:MAX_TASKS_PER_PERIOD], start=1):
        task["id"] = f"{prefix}t{index}"
    return kept[:MAX_TASKS_PER_PERIOD]


def _normalize_period(
    raw: Any,
    fallback: Dict[str, Any],
    context: GenerationContext,
    *,
    weekly: bool,
) -> Dict[str, Any]:
    number_key = "week" if weekly else "day"
    number = fallback[number_key]
    prefix = f"{'w' if weekly else 'd'}{number}"
    if not isinstance(raw, dict):
        return copy.deepcopy(fallback)

    raw_tasks = raw.get("tasks") if isinstance(raw.get("tasks"), list) else []
    tasks = []
    for index, item in enumerate(raw_tasks, start=1):
        task = normalize_task(item, f"{prefix}t{index}", weekly=weekly)
        if task is not None:
            tasks.append(task)
    tasks = sanitize_tasks(tasks, context, prefix)
    if not tasks:
        tasks = copy.deepcopy(fallback["tasks"])

    title = clean_text(raw.get("title"))
    title_ar = clean_text(raw.get("titleAr"))
    period: Dict[str, Any] = {
        number_key: number,
        "title": title or title_ar or fallback["title"],
        "titleAr": title_ar or title or fallback["titleAr"],
    }
    if weekly:
        goal = clean_text(raw.get("weeklyGoal"))
        goal_ar = clean_text(raw.get("weeklyGoalAr"))
        period.update(
            {
                "weeklyGoal": goal or goal_ar or fallback["weeklyGoal"],
                "weeklyGoalAr": goal_ar or goal or fallback["weeklyGoalAr"],
                "checkpoints": _list_or(raw.get("checkpoints"), fallback["checkpoints"]),
                "checkpointsAr": _list_or(raw.get("checkpointsAr"), fallback["checkpointsAr"]),
                "safetyNotes": _merge_notes(raw.get("safetyNotes"), fallback["safetyNotes"]),
                "safetyNotesAr": _merge_notes(raw.get("safetyNotesAr"), fallback["safetyNotesAr"]),
            }
        )
    else:
        theme = clean_text(raw.get("theme"))
        theme_ar = clean_text(raw.get("themeAr"))
        goal = clean_text(raw.get("dailyGoal"))
        goal_ar = clean_text(raw.get("dailyGoalAr"))
        period.update(
            {
                "theme": theme or theme_ar or fallback["theme"],
                "themeAr": theme_ar or theme or fallback["themeAr"],
                "dailyGoal": goal or goal_ar or fallback["dailyGoal"],
                "dailyGoalAr": goal_ar or goal or fallback["dailyGoalAr"],
            }
        )
    period["tasks"] = tasks
    return period


def _merge_notes(raw: Any, required: List[str]) -> List[str]:
    """Model notes first, then any server safety note the model left out.

    Required notes are never trimmed; only model notes give way to the cap.
    """
    notes = clean_text_list(raw)
    missing = [note for note in required if note not in notes]
    return notes[: max(0, MAX_LIST_ITEMS - len(missing))] + missing


def _match_periods(raw_periods: Any, count: int, key: str) -> List[Any]:
    """Pick the payload entry for each period number: exact number first, then position."""
    entries = raw_periods if isinstance(raw_periods, list) else []
    by_number: Dict[int, Any] = {}
    for entry in entries:
        number = _period_number(entry, key)
        if number is not None and number not in by_number:
            by_number[number] = entry
    matched: List[Any] = []
    for position in range(count):
        number = position + 1
        if number in by_number:
            matched.append(by_number[number])
        elif position < len(entries) and _period_number(entries[position], key) is None:
            matched.append(entries[position])
        else:
            matched.append(None)
    return matched


def normalize_protocol(
    payload: Dict[str, Any],
    fallback: Dict[str, Any],
    context: GenerationContext,
) -> Dict[str, Any]:
    """
    Merge a model payload over the fallback protocol.

    Identity and shape fields (id, planMode, durationDays, durationWeeks,
    period count, progressData, qaSummary) always come from the fallback.
    Text fields come from the payload when usable.
    """
    weekly = context.plan_mode == "weekly"
    list_key, number_key = ("weeks", "week") if weekly else ("days", "day")

    protocol: Dict[str, Any] = {
        "id": fallback["id"],
        "planMode": fallback["planMode"],
        "durationDays": fallback["durationDays"],
        "archetype": fallback["archetype"],
    }
    if weekly:
        protocol["durationWeeks"] = fallback["durationWeeks"]

    for key in (
        "title",
        "subtitle",
        "scienceOverview",
        "profileFitSummary",
    ):
        english = clean_text(payload.get(key))
        arabic = clean_text(payload.get(f"{key}Ar"))
        protocol[key] = english or arabic or fallback[key]
        protocol[f"{key}Ar"] = arabic or english or fallback[f"{key}Ar"]

    for key in ("focus", "priorityActions"):
        protocol[key] = _list_or(payload.get(key), fallback[key])
        protocol[f"{key}Ar"] = _list_or(payload.get(f"{key}Ar"), fallback[f"{key}Ar"])
    protocol["safetyNotesGlobal"] = _merge_notes(payload.get("safetyNotesGlobal"), fallback["safetyNotesGlobal"])
    protocol["safetyNotesGlobalAr"] = _merge_notes(
        payload.get("safetyNotesGlobalAr"), fallback["safetyNotesGlobalAr"]
    )
    protocol["qaSummary"] = list(fallback["qaSummary"])
    protocol["progressData"] = copy.deepcopy(fallback["progressData"])

    fallback_periods = fallback[list_key]
    matched = _match_periods(payload.get(list_key), len(fallback_periods), number_key)
    substituted = sum(1 for entry in matched if entry is None)
    if substituted:
        logger.info("Model reply missing %s of %s %s; using fallback entries", substituted, len(matched), list_key)
    protocol[list_key] = [
        _normalize_period(raw, period, context, weekly=weekly) for raw, period in zip(matched, fallback_periods)
    ]
    return protocol
