"""Validation of planner/generator request bodies into a typed context."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ascend.core.errors import INVALID_DURATION, MISSING_PROFILE, MISSING_QUERY, bad_request
from ascend.services.goal_archetypes import Locale, normalize_locale
from ascend.services.profile_service import is_valid_profile, normalize_profile

MIN_DURATION_DAYS = 7
MAX_DURATION_DAYS = 90


@dataclass
class PlanningContext:
    query: str
    locale: Locale
    duration_days: int
    profile: Dict[str, Any]
    qa_history: List[Dict[str, Any]] = field(default_factory=list)
    plan_mode_enabled: bool = True

    def answer(self, question_id: str) -> Optional[str]:
        for entry in self.qa_history:
            if entry["questionId"] == question_id:
                return entry["value"]
        return None


def normalize_query(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""


def normalize_qa_history(raw: Any) -> List[Dict[str, Any]]:
    """Keep only well-formed answers; label is optional."""
    if not isinstance(raw, list):
        return []
    normalized: List[Dict[str, Any]] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        question_id = entry.get("questionId")
        value = entry.get("value")
        if not isinstance(question_id, str) or not question_id or not isinstance(value, str) or not value:
            continue
        answer: Dict[str, Any] = {"questionId": question_id, "value": value}
        if isinstance(entry.get("label"), str):
            answer["label"] = entry["label"]
        normalized.append(answer)
    return normalized


def js_round(value: float) -> int:
    # Half-up rounding to match the web client's Math.round.
    return int(math.floor(value + 0.5))


def parse_duration_days(raw: Any) -> Optional[int]:
    """Accept numbers and numeric strings in [7, 90]; fractional values round half-up."""
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            return None
    if not isinstance(raw, (int, float)) or not math.isfinite(raw):
        return None
    if raw < MIN_DURATION_DAYS or raw > MAX_DURATION_DAYS:
        return None
    return js_round(raw)


def build_planning_context(
    *,
    query: Any,
    locale: Any,
    duration_days: Any,
    profile: Any,
    qa_history: Any,
    plan_mode_enabled: Any = True,
) -> PlanningContext:
    """Validate in the order the web client reports errors: query, duration, profile."""
    clean_query = normalize_query(query)
    if not clean_query:
        raise bad_request("Query is required.", MISSING_QUERY)
    days = parse_duration_days(duration_days)
    if days is None:
        raise bad_request("Duration must be between 7 and 90.", INVALID_DURATION)
    if not is_valid_profile(profile):
        raise bad_request("Valid profile is required.", MISSING_PROFILE)
    return PlanningContext(
        query=clean_query,
        locale=normalize_locale(locale),
        duration_days=days,
        profile=normalize_profile(profile, clean_query),
        qa_history=normalize_qa_history(qa_history),
        plan_mode_enabled=plan_mode_enabled is not False,
    )
