"""Deterministic, model-free protocol used when the LLM is unavailable or unusable."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ascend.services.goal_alignment import enforce_goal_alignment
from ascend.services.planner_questions import build_profile_fit_summary, question_pack
from ascend.services.planning_request import js_round
from ascend.services.protocol_context import CONDITION_RULES, GenerationContext
from ascend.services.protocol_normalizer import sanitize_tasks
from ascend.services.protocol_templates import (
    ARCHETYPE_CONTENT,
    BASE_SAFETY_NOTES,
    CONDITION_SAFETY_NOTE,
    FREQUENCY_TEXT,
    HYDRATION_TASK,
    MINOR_SAFETY_NOTE,
    REST_DAY_TASK,
    SLEEP_TASK,
    SUPPLEMENTS_DECLINED_NOTE,
    TRAINING_DAY_PATTERNS,
    WAKE_TASK,
)

MAX_PROGRESS_IMPACT = 100


def phase_index(position: int, count: int) -> int:
    """0-based third of the plan that a 0-based period position falls in."""
    return min(2, position * 3 // max(1, count))


def build_progress_data(duration_days: int) -> List[Dict[str, int]]:
    # Ease-out curve: early days show the fastest visible change.
    return [
        {"day": day, "impact": js_round(MAX_PROGRESS_IMPACT * (1 - (1 - day / duration_days) ** 2))}
        for day in range(1, duration_days + 1)
    ]


def _render(template: Dict[str, Any], context: GenerationContext, phase: int) -> Dict[str, Any]:
    values = {"sets": context.base_sets + (1 if phase == 2 else 0), "minutes": context.session_minutes}
    task = {key: value for key, value in template.items() if key != "cadence"}
    for key in ("action", "actionAr", "tips", "tipsAr"):
        if key in task:
            task[key] = task[key].format(**values)
    return task


def _frequency(template: Dict[str, Any], context: GenerationContext, sessions: int) -> Tuple[str, str]:
    cadence = template.get("cadence", "daily")
    if cadence == "training":
        return f"{sessions}x per week", f"{sessions} مرات أسبوعيًا"
    if cadence == "rest":
        rest_days = 7 - context.training_days
        return f"{rest_days}x per week (rest days)", f"{rest_days} مرات أسبوعيًا (أيام الراحة)"
    return FREQUENCY_TEXT.get(cadence, FREQUENCY_TEXT["daily"])


def _supplement_template(context: GenerationContext) -> List[Dict[str, Any]]:
    template = ARCHETYPE_CONTENT[context.archetype].get("supplement")
    return [template] if template is not None and context.allow_supplements else []


def build_day(context: GenerationContext, day: int) -> Dict[str, Any]:
    content = ARCHETYPE_CONTENT[context.archetype]
    phase = phase_index(day - 1, context.period_count)
    name, name_ar, goal, goal_ar = content["phases"][phase]
    pattern = TRAINING_DAY_PATTERNS[context.training_days]
    is_training = pattern[(day - 1) % 7]
    if is_training:
        sessions_before = sum(1 for offset in range(day - 1) if pattern[offset % 7])
        rotation = content["training"]
        main = rotation[sessions_before % len(rotation)]
    else:
        main = REST_DAY_TASK

    templates = [WAKE_TASK, HYDRATION_TASK, content["meal"], main, content["recovery"]]
    templates += _supplement_template(context)
    templates.append(SLEEP_TASK)
    tasks = sanitize_tasks([_render(template, context, phase) for template in templates], context, f"d{day}")
    return {
        "day": day,
        "title": f"Day {day}: {name}",
        "titleAr": f"اليوم {day}: {name_ar}",
        "theme": "Training day" if is_training else "Recovery day",
        "themeAr": "يوم تدريب" if is_training else "يوم تعافٍ",
        "dailyGoal": goal,
        "dailyGoalAr": goal_ar,
        "tasks": tasks,
    }


def _session_shares(total: int, slots: int) -> List[int]:
    return [total // slots + (1 if index < total % slots else 0) for index in range(slots)]


def build_week(context: GenerationContext, week: int, safety: Tuple[List[str], List[str]]) -> Dict[str, Any]:
    content = ARCHETYPE_CONTENT[context.archetype]
    phase = phase_index(week - 1, context.period_count)
    name, name_ar, goal, goal_ar = content["phases"][phase]

    entries: List[Tuple[Dict[str, Any], int]] = [(content["meal"], 0)]
    rotation = content["training"]
    for template, sessions in zip(rotation, _session_shares(context.training_days, len(rotation))):
        if sessions:
            entries.append((template, sessions))
    entries += [(REST_DAY_TASK, 0), (content["recovery"], 0), (HYDRATION_TASK, 0), (WAKE_TASK, 0)]
    entries += [(template, 0) for template in _supplement_template(context)]
    entries.append((SLEEP_TASK, 0))

    tasks = []
    for template, sessions in entries:
        task = _render(template, context, phase)
        task["frequency"], task["frequencyAr"] = _frequency(template, context, sessions)
        tasks.append(task)

    notes, notes_ar = safety
    return {
        "week": week,
        "title": f"Week {week}: {name}",
        "titleAr": f"الأسبوع {week}: {name_ar}",
        "weeklyGoal": goal,
        "weeklyGoalAr": goal_ar,
        "checkpoints": [checkpoint for checkpoint, _ in content["checkpoints"]],
        "checkpointsAr": [checkpoint_ar for _, checkpoint_ar in content["checkpoints"]],
        "safetyNotes": list(notes),
        "safetyNotesAr": list(notes_ar),
        "tasks": sanitize_tasks(tasks, context, f"w{week}"),
    }


def build_safety_notes(context: GenerationContext) -> Tuple[List[str], List[str]]:
    notes = [note for note, _ in BASE_SAFETY_NOTES]
    notes_ar = [note_ar for _, note_ar in BASE_SAFETY_NOTES]
    if context.conditions:
        conditions = str(context.profile.get("injuriesOrConditions") or "").strip()
        notes.append(CONDITION_SAFETY_NOTE[0].format(conditions=conditions))
        notes_ar.append(CONDITION_SAFETY_NOTE[1].format(conditions=conditions))
        for name in context.conditions:
            notes.append(CONDITION_RULES[name]["note"])
            notes_ar.append(CONDITION_RULES[name]["note_ar"])
    if float(context.profile.get("age", 0)) < 18:
        notes.append(MINOR_SAFETY_NOTE[0])
        notes_ar.append(MINOR_SAFETY_NOTE[1])
    elif not context.allow_supplements:
        notes.append(SUPPLEMENTS_DECLINED_NOTE[0])
        notes_ar.append(SUPPLEMENTS_DECLINED_NOTE[1])
    return notes, notes_ar


def build_priority_actions(context: GenerationContext) -> Tuple[List[str], List[str]]:
    content = ARCHETYPE_CONTENT[context.archetype]
    days = context.training_days
    minutes = context.session_minutes
    actions = [
        f"Train {days} days per week, about {minutes} minutes per session",
        content["meal"]["action"],
        "Sleep 7-9 hours every night",
    ]
    actions_ar = [
        f"تمرن {days} أيام أسبوعيًا، حوالي {minutes} دقيقة لكل جلسة",
        content["meal"]["actionAr"],
        "نم 7-9 ساعات كل ليلة",
    ]
    return actions, actions_ar


def build_qa_summary(context: GenerationContext) -> List[str]:
    """One "question: answer" line per planner answer, using option labels when known."""
    planning = context.planning
    questions = {question["id"]: question for question in question_pack(context.archetype)}
    summary = []
    for entry in planning.qa_history:
        question = questions.get(entry["questionId"])
        label = entry.get("label")
        if question is not None and not label:
            for option in question["options"]:
                if option["value"] == entry["value"]:
                    label = option["label_ar"] if planning.locale == "ar" else option["label"]
                    break
        if question is not None:
            prompt = question["question_ar"] if planning.locale == "ar" else question["question"]
        else:
            prompt = entry["questionId"]
        summary.append(f"{prompt} {label or entry['value']}")
    return summary


def build_fallback_protocol(context: GenerationContext) -> Dict[str, Any]:
    """Build the full protocol from templates. Same context in, same protocol out."""
    content = ARCHETYPE_CONTENT[context.archetype]
    safety = build_safety_notes(context)
    actions, actions_ar = build_priority_actions(context)
    protocol: Dict[str, Any] = {
        "id": context.protocol_id,
        "planMode": context.plan_mode,
        "durationDays": context.planning.duration_days,
        "archetype": context.archetype,
        "title": content["title"],
        "titleAr": content["title_ar"],
        "subtitle": content["subtitle"],
        "subtitleAr": content["subtitle_ar"],
        "focus": list(content["focus"]),
        "focusAr": list(content["focus_ar"]),
        "scienceOverview": content["science_overview"],
        "scienceOverviewAr": content["science_overview_ar"],
        "profileFitSummary": build_profile_fit_summary(context.profile, "en"),
        "profileFitSummaryAr": build_profile_fit_summary(context.profile, "ar"),
        "priorityActions": actions,
        "priorityActionsAr": actions_ar,
        "safetyNotesGlobal": list(safety[0]),
        "safetyNotesGlobalAr": list(safety[1]),
        "qaSummary": build_qa_summary(context),
        "progressData": build_progress_data(context.planning.duration_days),
    }
    if context.plan_mode == "weekly":
        protocol["durationWeeks"] = context.period_count
        protocol["weeks"] = [build_week(context, week, safety) for week in range(1, context.period_count + 1)]
    else:
        protocol["days"] = [build_day(context, day) for day in range(1, context.period_count + 1)]
    return enforce_goal_alignment(
        protocol, context.archetype, allow_supplements=context.allow_supplements, context=context
    )
