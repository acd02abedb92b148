"""Duration advisor endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Request

from ascend.api.schemas.duration import DurationRequest, DurationSuggestion
from ascend.core.errors import MISSING_QUERY, bad_request
from ascend.observability.metrics import log_metric
from ascend.observability.tracing import trace
from ascend.services.duration_advisor import suggest_duration
from ascend.services.goal_archetypes import normalize_locale
from ascend.services.planning_request import normalize_query

router = APIRouter(prefix="/api")


@router.post("/suggest-duration", response_model=DurationSuggestion, tags=["planner"])
def suggest_duration_route(payload: DurationRequest, request: Request) -> DurationSuggestion:
    """Suggest a realistic protocol length for the goal; never fails once the query is present."""
    query = normalize_query(payload.query)
    if not query:
        raise bad_request("Query is required.", MISSING_QUERY)
    locale = normalize_locale(payload.locale)
    request_id = getattr(request.state, "request_id", None)

    with trace("http.suggest_duration", metadata={"route": "/api/suggest-duration", "locale": locale}, request_id=request_id):
        suggestion = suggest_duration(query, locale)

    log_metric("duration.suggested_days", suggestion["suggested_days"], metadata={"goal_type": suggestion["goal_type"]})
    return DurationSuggestion(**suggestion)
