"""Derived generation settings shared by the fallback builder, normalizer and alignment pass."""
from __future__ import annotations

import hashlib
import json
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Literal, Tuple

from ascend.services.goal_archetypes import infer_archetype
from ascend.services.planning_request import PlanningContext
from ascend.services.protocol_templates import SESSION_MINUTES, SETS_BY_ACTIVITY

SupplementMode = Literal["full", "minimal", "none"]

ADULT_AGE = 18
WEEKLY_THRESHOLD_DAYS = 7

# Each rule: the condition text that triggers it, and the training text that loads the joint.
CONDITION_RULES: Dict[str, Dict[str, Any]] = {
    "knee": {
        "condition": re.compile(r"(knee|acl|mcl|menisc|patell|ركب)", re.IGNORECASE),
        "load": re.compile(
            r"(jump|sprint|squat|lunge|burpee|plyo|bound|hop|skip|box|قفز|عدو|سكوات|طعن|وثب)", re.IGNORECASE
        ),
        "note": "Knee-friendly: reduce range and impact, keep the knee behind the toes, stop if pain rises.",
        "note_ar": "مراعاة الركبة: قلل المدى والصدمات، أبقِ الركبة خلف أصابع القدم، وتوقف إذا زاد الألم.",
    },
    "back": {
        "condition": re.compile(r"(back|spine|lumbar|disc|sciatica|ظهر|فقرات|ديسك|عرق النسا)", re.IGNORECASE),
        "load": re.compile(
            r"(deadlift|good morning|swing|snatch|clean|heavy|loaded carry|رفعة|مميتة|خطف)", re.IGNORECASE
        ),
        "note": "Back-friendly: use lighter loads, brace the core and keep a neutral spine.",
        "note_ar": "مراعاة الظهر: استخدم أوزانًا أخف، شد عضلات البطن، وحافظ على استقامة العمود الفقري.",
    },
    "shoulder": {
        "condition": re.compile(r"(shoulder|rotator|labrum|كتف|اكتاف|أكتاف)", re.IGNORECASE),
        "load": re.compile(
            r"(overhead|press|handstand|dip|snatch|pull-up|ضغط|فوق الرأس|متوازي)", re.IGNORECASE
        ),
        "note": "Shoulder-friendly: stay in a pain-free range and avoid loading overhead.",
        "note_ar": "مراعاة الكتف: ابقَ في مدى خالٍ من الألم وتجنب الأحمال فوق الرأس.",
    },
}


@dataclass(frozen=True)
class GenerationContext:
    planning: PlanningContext
    archetype: str
    plan_mode: Literal["daily", "weekly"]
    period_count: int
    supplement_mode: SupplementMode
    training_days: int
    session_minutes: int
    base_sets: int
    conditions: Tuple[str, ...]
    protocol_id: str

    @property
    def allow_supplements(self) -> bool:
        return self.supplement_mode != "none"

    @property
    def profile(self) -> Dict[str, Any]:
        return self.planning.profile

    @property
    def locale(self) -> str:
        return self.planning.locale


def resolve_plan_mode(duration_days: int, plan_mode_enabled: bool) -> Literal["daily", "weekly"]:
    return "weekly" if plan_mode_enabled and duration_days > WEEKLY_THRESHOLD_DAYS else "daily"


def detect_conditions(text: str) -> Tuple[str, ...]:
    if not text or text.strip().lower() in {"none", "no", "لا", "لا يوجد"}:
        return ()
    return tuple(name for name, rule in CONDITION_RULES.items() if rule["condition"].search(text))


def resolve_supplement_mode(planning: PlanningContext) -> SupplementMode:
    if float(planning.profile.get("age", 0)) < ADULT_AGE:
        return "none"
    preference = planning.answer("supplements_preference")
    if preference == "no":
        return "none"
    if preference == "minimal":
        return "minimal"
    return "full"


def resolve_training_days(planning: PlanningContext) -> int:
    answer = planning.answer("training_days_per_week")
    if answer == "5_plus":
        return 5
    if answer and answer.isdigit():
        return max(2, min(5, int(answer)))
    activity = planning.profile.get("activityLevel")
    if activity == "athlete":
        return 5
    if activity == "active":
        return 4
    return 3


def protocol_id_for(planning: PlanningContext, plan_mode: str) -> str:
    """Stable id: identical requests must produce byte-identical protocols."""
    canonical = json.dumps(
        {
            "query": planning.query,
            "locale": planning.locale,
            "durationDays": planning.duration_days,
            "planMode": plan_mode,
            "profile": planning.profile,
            "qaHistory": planning.qa_history,
        },
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return "protocol-" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def build_generation_context(planning: PlanningContext) -> GenerationContext:
    plan_mode = resolve_plan_mode(planning.duration_days, planning.plan_mode_enabled)
    period_count = (
        math.ceil(planning.duration_days / 7) if plan_mode == "weekly" else planning.duration_days
    )
    training_days = resolve_training_days(planning)
    return GenerationContext(
        planning=planning,
        archetype=infer_archetype(planning.query),
        plan_mode=plan_mode,
        period_count=period_count,
        supplement_mode=resolve_supplement_mode(planning),
        training_days=training_days,
        session_minutes=SESSION_MINUTES.get(planning.answer("daily_time_window") or "", 40),
        base_sets=SETS_BY_ACTIVITY.get(str(planning.profile.get("activityLevel")), 3),
        conditions=detect_conditions(str(planning.profile.get("injuriesOrConditions") or "")),
        protocol_id=protocol_id_for(planning, plan_mode),
    )
