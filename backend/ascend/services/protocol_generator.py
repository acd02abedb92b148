"""Protocol generation: DeepSeek with two shrinking attempts, deterministic fallback otherwise."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ascend.core.config import settings
from ascend.observability.metrics import log_metric, timed
from ascend.observability.tracing import annotate, trace
from ascend.services import llm_client
from ascend.services.goal_alignment import enforce_goal_alignment
from ascend.services.planning_request import PlanningContext
from ascend.services.protocol_context import GenerationContext, build_generation_context
from ascend.services.protocol_fallback import build_fallback_protocol
from ascend.services.protocol_normalizer import normalize_protocol

logger = logging.getLogger(__name__)

GENERATION_TEMPERATURE = 0.4


@dataclass(frozen=True)
class GenerationAttempt:
    max_tokens: int
    timeout_s: float


@dataclass
class GenerationResult:
    protocol: Dict[str, Any]
    source: str
    attempts: int
    failure_code: Optional[str] = None


def generation_attempts() -> Tuple[GenerationAttempt, ...]:
    return (
        GenerationAttempt(max_tokens=8000, timeout_s=settings.generation_primary_timeout_s),
        GenerationAttempt(max_tokens=4000, timeout_s=settings.generation_retry_timeout_s),
    )


def _period_shape(context: GenerationContext) -> str:
    task_shape = (
        '{"action": "...", "actionAr": "...", "category": "wake|meal|supplement|training|recovery|hydration|sleep", '
        '"scienceWhy": "...", "scienceWhyAr": "...", "visualImpact": "low|medium|high", "tips": "...", "tipsAr": "..."'
    )
    if context.plan_mode == "weekly":
        return (
            '"weeks": [{"week": 1, "title": "...", "titleAr": "...", "weeklyGoal": "...", "weeklyGoalAr": "...", '
            '"checkpoints": ["..."], "checkpointsAr": ["..."], "safetyNotes": ["..."], "safetyNotesAr": ["..."], '
            f'"tasks": [{task_shape}, "frequency": "3x per week", "frequencyAr": "..."}}]}}]'
        )
    return (
        '"days": [{"day": 1, "title": "...", "titleAr": "...", "theme": "...", "themeAr": "...", '
        f'"dailyGoal": "...", "dailyGoalAr": "...", "tasks": [{task_shape}}}]}}]'
    )


def build_generation_messages(context: GenerationContext, *, compact: bool = False) -> List[Dict[str, str]]:
    """System + user messages asking for the protocol JSON; `compact` trims length for the retry."""
    planning = context.planning
    period_word = "weeks" if context.plan_mode == "weekly" else "days"
    rules = [
        f"Return exactly {context.period_count} {period_word}, numbered from 1.",
        "Every text field needs an English value and an Arabic value (the *Ar keys).",
        "Every task must serve the stated goal; be specific with sets, reps, grams or minutes.",
        "Respect the injuries/conditions field: no exercise that loads an affected joint at high impact.",
    ]
    if not context.allow_supplements:
        rules.append("Do not include any supplement tasks.")
    elif context.supplement_mode == "minimal":
        rules.append("At most one supplement task per period.")
    if compact:
        rules.append("Keep every text field under 120 characters and use at most 6 tasks per period.")

    system = (
        "You are an evidence-based fitness and body-composition coach. "
        "You write personalized, safe, goal-specific protocols and answer with JSON only."
    )
    user = "\n".join(
        [
            f'Goal: "{planning.query}"',
            f"Duration: {planning.duration_days} days ({context.plan_mode} plan)",
            f"Preferred language: {planning.locale}",
            f"Profile: {json.dumps(planning.profile, ensure_ascii=False, sort_keys=True)}",
            f"Planner answers: {json.dumps(planning.qa_history, ensure_ascii=False)}",
            "",
            "Rules:",
            *[f"- {rule}" for rule in rules],
            "",
            "Return one JSON object with this shape:",
            "{",
            '  "title": "...", "titleAr": "...", "subtitle": "...", "subtitleAr": "...",',
            '  "focus": ["..."], "focusAr": ["..."], "scienceOverview": "...", "scienceOverviewAr": "...",',
            '  "profileFitSummary": "...", "profileFitSummaryAr": "...",',
            '  "priorityActions": ["..."], "priorityActionsAr": ["..."],',
            '  "safetyNotesGlobal": ["..."], "safetyNotesGlobalAr": ["..."],',
            f"  {_period_shape(context)}",
            "}",
        ]
    )
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def _finalize(payload: Dict[str, Any], fallback: Dict[str, Any], context: GenerationContext) -> Dict[str, Any]:
    normalized = normalize_protocol(payload, fallback, context)
    return enforce_goal_alignment(
        normalized, context.archetype, allow_supplements=context.allow_supplements, context=context
    )


def generate_protocol(planning: PlanningContext) -> GenerationResult:
    """Never raises for model failures: the worst case is the fallback protocol."""
    context = build_generation_context(planning)
    fallback = build_fallback_protocol(context)
    metric_meta = {"archetype": context.archetype, "plan_mode": context.plan_mode, "periods": context.period_count}

    client = llm_client.create_client()
    if client is None:
        log_metric("protocol.generate.fallback", 1, {**metric_meta, "reason": "no_api_key"})
        return GenerationResult(protocol=fallback, source="fallback", attempts=0)

    failure_code: Optional[str] = None
    attempts = generation_attempts()
    with trace("protocol.generate", metadata=metric_meta) as span:
        for number, attempt in enumerate(attempts, start=1):
            with timed("protocol.generate.attempt", {**metric_meta, "attempt": number}) as extra:
                try:
                    content = llm_client.complete(
                        client,
                        build_generation_messages(context, compact=number > 1),
                        max_tokens=attempt.max_tokens,
                        temperature=GENERATION_TEMPERATURE,
                        timeout_s=attempt.timeout_s,
                    )
                    payload = llm_client.parse_json_object(content)
                except llm_client.LLMError as exc:
                    failure_code = exc.code
                    extra["code"] = exc.code
                    logger.warning(
                        "Protocol attempt %s/%s failed (%s): %s", number, len(attempts), exc.code, exc
                    )
                    log_metric("protocol.generate.attempt_failed", 1, {**metric_meta, "attempt": number, "code": exc.code})
                    continue

                protocol = _finalize(payload, fallback, context)
                extra["code"] = "ok"
                annotate(span, attempt=number, llm_output_text=content)
                log_metric("protocol.generate.success", 1, {**metric_meta, "attempt": number})
                return GenerationResult(protocol=protocol, source="llm", attempts=number)

        annotate(span, fallback=True, failure_code=failure_code)

    logger.warning("All protocol attempts failed (last code %s); returning fallback", failure_code)
    log_metric("protocol.generate.fallback", 1, {**metric_meta, "reason": failure_code or "unknown"})
    return GenerationResult(protocol=fallback, source="fallback", attempts=len(attempts), failure_code=failure_code)
