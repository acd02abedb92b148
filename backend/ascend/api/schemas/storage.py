"""Schemas for the per-client protocol library, generation task and pro flag."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from ascend.api.schemas.common import CamelModel
from ascend.api.schemas.profile import PlannerAnswer


class PrivateProtocolEntry(CamelModel):
    id: str
    title: str
    title_ar: str
    subtitle: str
    subtitle_ar: str
    detailed_days: float
    total_days: float
    created_at: str
    updated_at: str
    plan_mode: Optional[Literal["daily", "weekly"]] = None
    duration_weeks: Optional[float] = None
    profile_snapshot: Optional[Dict[str, Any]] = None
    qa_summary: Optional[List[str]] = None
    qa_history: Optional[List[Dict[str, Any]]] = None
    custom_name: Optional[str] = None
    protocol: Dict[str, Any]


class PrivateProtocolList(CamelModel):
    entries: List[PrivateProtocolEntry]
    last_opened_id: Optional[str] = None


class RenameRequest(CamelModel):
    custom_name: str = ""


class OpenProtocolResponse(CamelModel):
    entry: PrivateProtocolEntry
    last_opened_id: str


class GenerationTaskRequest(CamelModel):
    """Same loose body as /api/generate, plus the planner's readable summary."""

    query: Any = None
    locale: Any = None
    duration_days: Any = None
    plan_mode_enabled: Any = True
    profile: Any = None
    qa_history: Any = None
    qa_summary: List[str] = Field(default_factory=list)


class GenerationTaskSnapshot(CamelModel):
    task_id: Optional[str] = None
    status: Literal["idle", "running", "success", "error"] = "idle"
    query: str = ""
    locale: Literal["ar", "en"] = "ar"
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    entry_id: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None


class ProAccessState(CamelModel):
    enabled: bool = False
    mode: Literal["none", "demo"] = "none"
    updated_at: Optional[str] = None


class ProAccessUpdate(CamelModel):
    enabled: bool


class PlannerSessionEnvelope(CamelModel):
    session: Optional[Dict[str, Any]] = None
    qa_history: List[PlannerAnswer] = Field(default_factory=list)


class AuthStatus(CamelModel):
    enabled: bool
    provider: Literal["google"] = "google"
