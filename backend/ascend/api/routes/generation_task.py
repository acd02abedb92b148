"""Background generation task endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ascend.api.deps import get_client_storage
from ascend.api.schemas.storage import GenerationTaskRequest, GenerationTaskSnapshot
from ascend.observability.metrics import log_metric
from ascend.observability.tracing import trace
from ascend.services.client_storage import ClientStorage
from ascend.services.generation_task import (
    GenerationTaskInput,
    GenerationTaskTracker,
    get_generation_tracker,
    load_snapshot,
)
from ascend.services.planning_request import build_planning_context

router = APIRouter(prefix="/generation-task", tags=["generation-task"])


@router.post("", response_model=GenerationTaskSnapshot, status_code=status.HTTP_202_ACCEPTED)
def start_generation_task(
    payload: GenerationTaskRequest,
    request: Request,
    storage: ClientStorage = Depends(get_client_storage),
    tracker: GenerationTaskTracker = Depends(get_generation_tracker),
) -> GenerationTaskSnapshot:
    """Validate the request, then generate in the background. A running task for the same user is reused."""
    context = build_planning_context(
        query=payload.query,
        locale=payload.locale,
        duration_days=payload.duration_days,
        profile=payload.profile,
        qa_history=payload.qa_history,
        plan_mode_enabled=payload.plan_mode_enabled,
    )
    request_id = getattr(request.state, "request_id", None)
    already_running = tracker.is_running(storage.user_id)
    with trace("generation_task.start", metadata={"reused": already_running}, request_id=request_id):
        tracker.start(storage, GenerationTaskInput(context=context, qa_summary=payload.qa_summary))
    log_metric("generation_task.started", 0 if already_running else 1)
    return GenerationTaskSnapshot(**tracker.snapshot(storage.user_id))


@router.get("", response_model=GenerationTaskSnapshot)
def get_generation_task(storage: ClientStorage = Depends(get_client_storage)) -> GenerationTaskSnapshot:
    return GenerationTaskSnapshot(**load_snapshot(storage))


@router.delete("", response_model=GenerationTaskSnapshot)
def reset_generation_task(
    storage: ClientStorage = Depends(get_client_storage),
    tracker: GenerationTaskTracker = Depends(get_generation_tracker),
) -> GenerationTaskSnapshot:
    return GenerationTaskSnapshot(**tracker.reset(storage))
