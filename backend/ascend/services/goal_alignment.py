"""Guarantee every period of a protocol actually works toward the inferred goal."""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from ascend.services.goal_archetypes import SUPPLEMENT_ARCHETYPES, matches_alignment
from ascend.services.protocol_context import GenerationContext
from ascend.services.protocol_normalizer import sanitize_task
from ascend.services.protocol_templates import ARCHETYPE_CONTENT, FREQUENCY_TEXT

_TEXT_FIELDS = ("action", "actionAr", "scienceWhy", "scienceWhyAr", "tips", "tipsAr")


def period_text(tasks: List[Dict[str, Any]]) -> str:
    return " ".join(str(task.get(field) or "") for task in tasks for field in _TEXT_FIELDS)


def _synthetic_task(template: Dict[str, Any], task_id: str, weekly: bool) -> Dict[str, Any]:
    task = {key: value for key, value in template.items() if key != "cadence"}
    task["id"] = task_id
    if weekly:
        task["frequency"], task["frequencyAr"] = FREQUENCY_TEXT["daily"]
    return task


def _next_task_id(prefix: str, tasks: List[Dict[str, Any]]) -> str:
    taken = {task.get("id") for task in tasks}
    index = len(tasks) + 1
    while f"{prefix}t{index}" in taken:
        index += 1
    return f"{prefix}t{index}"


def enforce_goal_alignment(
    protocol: Dict[str, Any],
    archetype: str,
    *,
    allow_supplements: bool,
    context: Optional[GenerationContext] = None,
) -> Dict[str, Any]:
    """
    Append a goal-aligned task to any day/week whose task text misses every
    alignment keyword, and a supplement task where the archetype expects one.

    Appended tasks go through the same safety pass as model tasks when a
    generation context is given. Returns a new protocol; applying it twice
    yields the same result.
    """
    content = ARCHETYPE_CONTENT.get(archetype, ARCHETYPE_CONTENT["general"])
    weekly = protocol.get("planMode") == "weekly"
    list_key, number_key, letter = ("weeks", "week", "w") if weekly else ("days", "day", "d")
    wants_supplement = (
        allow_supplements and archetype in SUPPLEMENT_ARCHETYPES and content.get("supplement") is not None
    )

    aligned = copy.deepcopy(protocol)
    for period in aligned.get(list_key) or []:
        tasks: List[Dict[str, Any]] = period.setdefault("tasks", [])
        prefix = f"{letter}{period[number_key]}"
        additions = []
        if not matches_alignment(period_text(tasks), archetype):
            additions.append(content["aligned"])
        if wants_supplement and not any(task.get("category") == "supplement" for task in tasks):
            additions.append(content["supplement"])
        for template in additions:
            task = _synthetic_task(template, _next_task_id(prefix, tasks), weekly)
            if context is not None:
                task = sanitize_task(task, context)
            if task is not None:
                tasks.append(task)
    return aligned
