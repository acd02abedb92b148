"""Main FastAPI application for the Ascend protocols backend."""
from fastapi import FastAPI, Request

from ascend.api.routes.auth import router as auth_router
from ascend.api.routes.duration import router as duration_router
from ascend.api.routes.generate import router as generate_router
from ascend.api.routes.generation_task import router as generation_task_router
from ascend.api.routes.planner import router as planner_router
from ascend.api.routes.profile import router as profile_router
from ascend.api.routes.protocols import router as protocols_router
from ascend.core.config import settings
from ascend.core.errors import register_exception_handlers
from ascend.core.logging import configure_logging
from ascend.core.middleware import RequestContextMiddleware
from ascend.observability.client import init_opik
from ascend.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)
app.include_router(duration_router)
app.include_router(planner_router)
app.include_router(generate_router)
app.include_router(generation_task_router)
app.include_router(protocols_router)
app.include_router(profile_router)
app.include_router(auth_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
