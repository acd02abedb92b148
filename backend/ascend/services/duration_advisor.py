"""Suggest a realistic protocol length for a free-text goal."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

from ascend.core.config import settings
from ascend.observability.metrics import log_metric
from ascend.observability.tracing import annotate, trace
from ascend.services import llm_client
from ascend.services.goal_archetypes import (
    GOAL_TYPES,
    GoalType,
    Locale,
    classify_goal_type,
    extract_requested_days,
)
from ascend.services.planning_request import js_round

logger = logging.getLogger(__name__)

ABSOLUTE_MIN_DAYS = 7
ABSOLUTE_MAX_DAYS = 90

GOAL_WINDOWS: Dict[str, Dict[str, int]] = {
    "quick_visual": {"min": 7, "max": 21, "fallback": 14},
    "posture_definition": {"min": 14, "max": 45, "fallback": 21},
    "fat_loss": {"min": 21, "max": 90, "fallback": 45},
    "muscle_gain": {"min": 42, "max": 90, "fallback": 60},
    "general": {"min": 14, "max": 60, "fallback": 21},
}

RATIONALE_EN = {
    "quick_visual": "This type of goal usually responds in a short window, so a short-to-medium duration is most realistic.",
    "posture_definition": "Posture and definition goals need a moderate timeline to make the adaptation visible and stable.",
    "fat_loss": "Sustainable fat-loss goals typically need a longer window to avoid unrealistic expectations.",
    "muscle_gain": "Muscle gain requires a longer horizon because structural adaptation does not happen quickly.",
    "general": "The suggested duration balances visible progress with realistic adherence.",
}

RATIONALE_AR = {
    "quick_visual": "هذا الهدف غالبًا يستجيب في مدى قصير مع تغييرات مرئية تدريجية، لذلك المدى القصير-المتوسط هو الأكثر واقعية.",
    "posture_definition": "الأهداف المرتبطة بالوضعية أو التفاصيل الشكلية تحتاج وقتًا متوسطًا لتثبيت السلوك العضلي وإظهار النتيجة.",
    "fat_loss": "خفض الدهون بشكل صحي يحتاج وقتًا أطول نسبيًا لتفادي نتائج مؤقتة أو غير مستقرة.",
    "muscle_gain": "بناء الكتلة العضلية يحتاج مدة أطول لأن التغير البنيوي في العضلات لا يحدث بسرعة.",
    "general": "المدة المقترحة توازن بين سرعة النتيجة وإمكانية الالتزام الواقعي بالخطة.",
}

URGENCY_RULES = (
    (re.compile(r"(asap|quick|fast|urgent|now|بسرعة|سريع|فورًا|حالًا)", re.IGNORECASE), -4),
    (re.compile(r"(extreme|hardcore|pro|max|ضخم|احترافي|جذري)", re.IGNORECASE), 5),
    (re.compile(r"(sustainable|steady|safe|واقعي|تدريجي|آمن)", re.IGNORECASE), 3),
)

COMPLEXITY_FAMILIES = (
    re.compile(r"(fat|دهون|تنشيف)", re.IGNORECASE),
    re.compile(r"(muscle|عضل|تضخيم)", re.IGNORECASE),
    re.compile(r"(posture|neck|jaw|وضعية|رقبة|فك)", re.IGNORECASE),
    re.compile(r"(vein|vascular|عروق)", re.IGNORECASE),
    re.compile(r"(strength|power|قوة)", re.IGNORECASE),
)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def estimate_urgency_adjustment(query: str) -> int:
    text = query.lower()
    return sum(delta for pattern, delta in URGENCY_RULES if pattern.search(text))


def estimate_complexity_adjustment(query: str) -> int:
    text = query.lower()
    families = sum(1 for pattern in COMPLEXITY_FAMILIES if pattern.search(text))
    if families >= 3:
        return 7
    if families == 2:
        return 3
    return 0


def goal_window(goal_type: str) -> tuple[int, int]:
    window = GOAL_WINDOWS[goal_type]
    return (
        clamp(window["min"], ABSOLUTE_MIN_DAYS, ABSOLUTE_MAX_DAYS),
        clamp(window["max"], ABSOLUTE_MIN_DAYS, ABSOLUTE_MAX_DAYS),
    )


def default_rationale(goal_type: str, locale: Locale) -> str:
    return (RATIONALE_AR if locale == "ar" else RATIONALE_EN)[goal_type]


def default_question(locale: Locale, suggested: int, min_days: int, max_days: int) -> str:
    if locale == "ar":
        return f"أنا فاهم هدفك. أفضل مدة لك الآن {suggested} يوم. اخترها مباشرة أو عدّل بسهولة داخل {min_days}-{max_days} يوم."
    return f"I understand your goal. Best fit now is {suggested} days. Keep it or quickly adjust within {min_days}-{max_days} days."


def quick_options(suggested: int, min_days: int, max_days: int) -> List[int]:
    fast = clamp(js_round(suggested * 0.8), min_days, max_days)
    balanced = clamp(suggested, min_days, max_days)
    deep = clamp(js_round(suggested * 1.25), min_days, max_days)
    return sorted({fast, balanced, deep})


def _suggestion(goal_type: str, suggested: int, locale: Locale, rationale: str, question: str) -> Dict[str, Any]:
    min_days, max_days = goal_window(goal_type)
    return {
        "suggested_days": suggested,
        "min_days": min_days,
        "max_days": max_days,
        "plan_mode_hint": "weekly" if suggested > 7 else "daily",
        "rationale": rationale,
        "question": question,
        "goal_type": goal_type,
        "quick_options": quick_options(suggested, min_days, max_days),
    }


def build_deterministic_suggestion(query: str, locale: Locale) -> Dict[str, Any]:
    goal_type = classify_goal_type(query)
    min_days, max_days = goal_window(goal_type)
    requested = extract_requested_days(query)
    base = requested if requested is not None else GOAL_WINDOWS[goal_type]["fallback"]
    adjusted = base + estimate_urgency_adjustment(query) + estimate_complexity_adjustment(query)
    suggested = clamp(adjusted, min_days, max_days)
    return _suggestion(
        goal_type,
        suggested,
        locale,
        default_rationale(goal_type, locale),
        default_question(locale, suggested, min_days, max_days),
    )


def normalize_suggestion(payload: Dict[str, Any], fallback: Dict[str, Any], locale: Locale) -> Dict[str, Any]:
    """Merge a model reply over the deterministic suggestion, field by field."""
    raw_goal = payload.get("goalType")
    goal_type: GoalType = raw_goal if raw_goal in GOAL_TYPES else fallback["goal_type"]
    min_days, max_days = goal_window(goal_type)

    suggested = _coerce_days(payload.get("suggestedDays"))
    suggested_days = clamp(suggested, min_days, max_days) if suggested is not None else fallback["suggested_days"]

    rationale = payload.get("rationale")
    if not isinstance(rationale, str) or not rationale.strip():
        rationale = default_rationale(goal_type, locale)
    question = payload.get("question")
    if not isinstance(question, str) or not question.strip():
        question = default_question(locale, suggested_days, min_days, max_days)

    return _suggestion(goal_type, suggested_days, locale, rationale.strip(), question.strip())


def _coerce_days(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return js_round(float(value))
    if isinstance(value, str):
        match = re.match(r"\s*(-?\d+)", value)
        return int(match.group(1)) if match else None
    return None


def _build_prompt(query: str, locale: Locale, fallback: Dict[str, Any]) -> str:
    return (
        "You classify fitness/body goals and suggest realistic protocol duration.\n\n"
        f'Goal query: "{query}"\n'
        f"Language: {locale}\n"
        "Allowed goalType values: quick_visual, fat_loss, muscle_gain, posture_definition, general\n\n"
        "Hard constraints:\n"
        "- quick_visual: 7..21 days\n"
        "- posture_definition: 14..45 days\n"
        "- fat_loss: 21..90 days\n"
        "- muscle_gain: 42..90 days\n"
        "- general: 14..60 days\n"
        "- absolute range: 7..90 days\n\n"
        "Return JSON only:\n"
        "{\n"
        '  "goalType": "one of allowed values",\n'
        '  "suggestedDays": number,\n'
        f'  "rationale": "short realistic explanation in {locale}",\n'
        f'  "question": "ask user to confirm/adjust suggested duration in {locale}"\n'
        "}\n\n"
        f"Keep it concise and realistic. If uncertain, use this fallback goalType: {fallback['goal_type']}."
    )


def suggest_duration(query: str, locale: Locale) -> Dict[str, Any]:
    """Return a duration suggestion; never raises for provider failures."""
    deterministic = build_deterministic_suggestion(query, locale)
    client = llm_client.create_client()
    if client is None:
        log_metric("duration.suggest.source", 0, {"source": "deterministic", "goal_type": deterministic["goal_type"]})
        return deterministic

    with trace("duration.suggest", metadata={"goal_type": deterministic["goal_type"], "locale": locale}) as span:
        try:
            content = llm_client.complete(
                client,
                [{"role": "system", "content": _build_prompt(query, locale, deterministic)}],
                max_tokens=260,
                temperature=0.2,
                timeout_s=settings.duration_advisor_timeout_s,
            )
            refined = normalize_suggestion(llm_client.parse_json_object(content), deterministic, locale)
        except llm_client.LLMError as exc:
            logger.warning("Duration refinement failed (%s); using deterministic suggestion", exc.code)
            log_metric("duration.suggest.source", 0, {"source": "deterministic", "reason": exc.code})
            return deterministic
        annotate(span, llm_output_text=content, suggested_days=refined["suggested_days"])

    log_metric("duration.suggest.source", 1, {"source": "llm", "goal_type": refined["goal_type"]})
    return refined
