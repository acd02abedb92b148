"""Planner Q&A endpoint and the saved planner session."""
from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Depends, Request, status

from ascend.api.deps import get_client_storage
from ascend.api.schemas.planner import AskResponse, PlannerRequest, ReadyResponse
from ascend.api.schemas.profile import PlannerSessionState
from ascend.api.schemas.storage import PlannerSessionEnvelope
from ascend.observability.metrics import log_metric
from ascend.observability.tracing import annotate, trace
from ascend.services.client_storage import PLANNER_QA_KEY, PLANNER_SESSION_KEY, ClientStorage
from ascend.services.planner_questions import plan_next_step
from ascend.services.planning_request import build_planning_context

router = APIRouter()


@router.post(
    "/api/planner/questions",
    response_model=Union[AskResponse, ReadyResponse],
    tags=["planner"],
)
def planner_questions(payload: PlannerRequest, request: Request) -> Union[AskResponse, ReadyResponse]:
    """Return the next planner question, or the ready summary once all three are answered."""
    context = build_planning_context(
        query=payload.query,
        locale=payload.locale,
        duration_days=payload.duration_days,
        profile=payload.profile,
        qa_history=payload.qa_history,
    )
    request_id = getattr(request.state, "request_id", None)
    metadata = {"route": "/api/planner/questions", "answered": len(context.qa_history), "locale": context.locale}

    with trace("planner.next_step", metadata=metadata, request_id=request_id) as span:
        step = plan_next_step(context)
        annotate(span, status=step["status"], progress=step["progress"])

    log_metric("planner.progress", step["progress"], metadata={"status": step["status"]})
    if step["status"] == "ready":
        return ReadyResponse(**step)
    return AskResponse(**step)


@router.get("/planner/session", response_model=PlannerSessionEnvelope, tags=["planner"])
def get_planner_session(storage: ClientStorage = Depends(get_client_storage)) -> PlannerSessionEnvelope:
    session = storage.get_item(PLANNER_SESSION_KEY)
    qa_history = storage.get_item(PLANNER_QA_KEY)
    return PlannerSessionEnvelope(
        session=session if isinstance(session, dict) else None,
        qa_history=qa_history if isinstance(qa_history, list) else [],
    )


@router.put("/planner/session", response_model=PlannerSessionEnvelope, tags=["planner"])
def save_planner_session(
    payload: PlannerSessionState,
    storage: ClientStorage = Depends(get_client_storage),
) -> PlannerSessionEnvelope:
    """Save in-progress planner state so the flow can resume; answers are mirrored separately."""
    session = payload.model_dump(by_alias=True, exclude_none=True)
    storage.set_item(PLANNER_SESSION_KEY, session)
    storage.set_item(PLANNER_QA_KEY, session["qaHistory"])
    return PlannerSessionEnvelope(session=session, qa_history=session["qaHistory"])


@router.delete("/planner/session", status_code=status.HTTP_204_NO_CONTENT, tags=["planner"])
def clear_planner_session(storage: ClientStorage = Depends(get_client_storage)) -> None:
    storage.remove_item(PLANNER_SESSION_KEY)
    storage.remove_item(PLANNER_QA_KEY)
