"""Schemas for user profiles and planner answers."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from ascend.api.schemas.common import CamelModel

Locale = Literal["ar", "en"]


class UserProfile(CamelModel):
    age: float
    sex: str
    activity_level: str
    primary_goal: str = ""
    injuries_or_conditions: str
    available_equipment: str
    units: str = "metric"
    height_cm: float
    weight_kg: float
    sleep_hours: Optional[float] = None


class PlannerAnswer(CamelModel):
    question_id: str
    value: str
    label: Optional[str] = None


class ProfileEnvelope(CamelModel):
    profile: UserProfile
    complete: bool
    errors: List[str] = Field(default_factory=list)
    display_height: float
    display_weight: float


class PlannerSessionState(CamelModel):
    query: str
    locale: Locale = "ar"
    duration_days: int = Field(..., ge=7, le=90)
    profile: UserProfile
    qa_history: List[PlannerAnswer] = Field(default_factory=list)
