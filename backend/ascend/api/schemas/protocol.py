"""Protocol document schemas: the shape every generated or fallback plan must satisfy."""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import Field, model_validator

from ascend.api.schemas.common import CamelModel

TaskCategory = Literal["wake", "meal", "supplement", "training", "recovery", "hydration", "sleep"]
VisualImpact = Literal["low", "medium", "high"]
PlanMode = Literal["daily", "weekly"]


class GenerateRequest(CamelModel):
    """Loosely typed on purpose: validation maps failures to explicit error codes."""

    query: Any = None
    locale: Any = None
    duration_days: Any = None
    plan_mode_enabled: Any = True
    profile: Any = None
    qa_history: Any = None


class TaskPoint(CamelModel):
    id: str
    action: str
    action_ar: str
    category: TaskCategory
    science_why: str
    science_why_ar: str
    visual_impact: VisualImpact
    tips: Optional[str] = None
    tips_ar: Optional[str] = None
    exercise_image: Optional[str] = None


class WeekTask(TaskPoint):
    frequency: str
    frequency_ar: str


class DayPlan(CamelModel):
    day: int
    title: str
    title_ar: str
    theme: str
    theme_ar: str
    daily_goal: str
    daily_goal_ar: str
    tasks: List[TaskPoint]


class WeekPlan(CamelModel):
    week: int
    title: str
    title_ar: str
    weekly_goal: str
    weekly_goal_ar: str
    checkpoints: List[str] = Field(default_factory=list)
    checkpoints_ar: List[str] = Field(default_factory=list)
    safety_notes: List[str] = Field(default_factory=list)
    safety_notes_ar: List[str] = Field(default_factory=list)
    tasks: List[WeekTask]


class ProgressPoint(CamelModel):
    day: int
    impact: int


class Protocol(CamelModel):
    id: str
    plan_mode: PlanMode
    duration_days: int
    duration_weeks: Optional[int] = None
    archetype: str
    title: str
    title_ar: str
    subtitle: str
    subtitle_ar: str
    focus: List[str]
    focus_ar: List[str]
    science_overview: str
    science_overview_ar: str
    profile_fit_summary: str
    profile_fit_summary_ar: str
    priority_actions: List[str] = Field(default_factory=list)
    priority_actions_ar: List[str] = Field(default_factory=list)
    safety_notes_global: List[str] = Field(default_factory=list)
    safety_notes_global_ar: List[str] = Field(default_factory=list)
    qa_summary: List[str] = Field(default_factory=list)
    progress_data: List[ProgressPoint]
    days: Optional[List[DayPlan]] = None
    weeks: Optional[List[WeekPlan]] = None

    @model_validator(mode="after")
    def _exactly_one_period_list(self) -> "Protocol":
        if self.plan_mode == "daily":
            if not self.days or self.weeks:
                raise ValueError("daily protocols carry days and no weeks")
        elif not self.weeks or self.days:
            raise ValueError("weekly protocols carry weeks and no days")
        return self
