"""DeepSeek chat-completions access through the OpenAI SDK."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import openai

from ascend.core.config import settings
from ascend.core.errors import AI_TIMEOUT, INVALID_JSON

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Any failure talking to the model provider."""

    code = "AI_ERROR"


class AITimeoutError(LLMError):
    code = AI_TIMEOUT


class InvalidLLMResponse(LLMError):
    code = INVALID_JSON


def create_client() -> Optional[openai.OpenAI]:
    """Return a DeepSeek client, or None when no API key is configured."""
    if not settings.llm_enabled:
        return None
    # Retries are sequenced by the callers with shrinking budgets, so the SDK must not retry on its own.
    return openai.OpenAI(
        api_key=settings.deepseek_api_key,
        base_url=settings.deepseek_base_url,
        max_retries=0,
    )


def complete(
    client: openai.OpenAI,
    messages: List[Dict[str, str]],
    *,
    max_tokens: int,
    temperature: float,
    timeout_s: float,
) -> str:
    """Run one chat completion and return the message text; raises LLMError subclasses."""
    try:
        completion = client.with_options(timeout=timeout_s).chat.completions.create(
            model=settings.deepseek_model,
            messages=messages,  # type: ignore[arg-type]
            max_tokens=max_tokens,
            temperature=temperature,
        )
    except openai.APITimeoutError as exc:
        raise AITimeoutError(f"Model call exceeded {timeout_s:.0f}s") from exc
    except openai.OpenAIError as exc:
        raise LLMError(str(exc)) from exc

    choices = getattr(completion, "choices", None) or []
    content = choices[0].message.content if choices else None
    if not content or not content.strip():
        raise InvalidLLMResponse("Empty response from model")
    return content


def parse_json_object(raw: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of a model reply.

    Accepts plain JSON, JSON wrapped in ``` fences, and JSON surrounded by
    prose (the outermost {...} slice is tried last).
    """
    text = (raw or "").strip()
    if text.startswith("```"):
        text = text[3:]
        if text.lower().startswith("json"):
            text = text[4:]
        text = text.strip()
        if text.endswith("```"):
            text = text[:-3].strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start < 0 or end <= start:
            raise InvalidLLMResponse("No JSON object in model reply") from None
        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError as exc:
            raise InvalidLLMResponse(f"Malformed JSON in model reply: {exc.msg}") from exc

    if not isinstance(parsed, dict):
        raise InvalidLLMResponse("Model reply is not a JSON object")
    return parsed
