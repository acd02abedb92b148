"""Schemas for the duration advisor endpoint."""
from __future__ import annotations

from typing import Any, List, Literal

from ascend.api.schemas.common import CamelModel


class DurationRequest(CamelModel):
    query: Any = None
    locale: Any = None


class DurationSuggestion(CamelModel):
    suggested_days: int
    min_days: int
    max_days: int
    plan_mode_hint: Literal["daily", "weekly"]
    rationale: str
    question: str
    goal_type: Literal["quick_visual", "fat_loss", "muscle_gain", "posture_definition", "general"]
    quick_options: List[int]
