"""Protocol generation endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Request

from ascend.api.schemas.protocol import GenerateRequest, Protocol
from ascend.observability.metrics import log_metric
from ascend.observability.tracing import trace
from ascend.services.planning_request import build_planning_context
from ascend.services.protocol_generator import generate_protocol

router = APIRouter(prefix="/api")


@router.post("/generate", response_model=Protocol, response_model_exclude_none=True, tags=["protocols"])
def generate(payload: GenerateRequest, request: Request) -> Protocol:
    """
    Generate a protocol for the goal.

    Returns 400 for an invalid query, duration or profile. Model failures never
    surface: the deterministic fallback protocol is returned instead.
    """
    context = build_planning_context(
        query=payload.query,
        locale=payload.locale,
        duration_days=payload.duration_days,
        profile=payload.profile,
        qa_history=payload.qa_history,
        plan_mode_enabled=payload.plan_mode_enabled,
    )
    request_id = getattr(request.state, "request_id", None)
    metadata = {"route": "/api/generate", "duration_days": context.duration_days, "locale": context.locale}

    with trace("http.generate", metadata=metadata, request_id=request_id):
        result = generate_protocol(context)

    log_metric(
        "protocol.generate.source",
        1 if result.source == "llm" else 0,
        metadata={"source": result.source, "attempts": result.attempts},
    )
    return Protocol.model_validate(result.protocol)
