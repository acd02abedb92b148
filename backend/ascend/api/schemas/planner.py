"""Schemas for the planner Q&A endpoint."""
from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import Field

from ascend.api.schemas.common import CamelModel


class PlannerRequest(CamelModel):
    """Loosely typed on purpose: validation maps failures to explicit error codes."""

    query: Any = None
    locale: Any = None
    duration_days: Any = None
    profile: Any = None
    qa_history: Any = None


class QuestionOption(CamelModel):
    value: str
    label: str
    label_ar: str


class PlannerQuestion(CamelModel):
    id: str
    question: str
    question_ar: str
    input_type: Literal["single_choice", "multi_choice", "text"] = "single_choice"
    required: bool = True
    options: Optional[List[QuestionOption]] = None
    reasoning_hint: Optional[str] = None
    reasoning_hint_ar: Optional[str] = None


class AskResponse(CamelModel):
    status: Literal["ask"] = "ask"
    next_question: PlannerQuestion
    progress: int
    reasoning_hint: str


class ReadyResponse(CamelModel):
    status: Literal["ready"] = "ready"
    progress: int = 100
    plan_brief: str
    key_constraints: List[str] = Field(default_factory=list)
    profile_fit_summary: str


PlannerResponse = Union[AskResponse, ReadyResponse]
