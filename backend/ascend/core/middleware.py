"""Custom FastAPI middleware."""
from __future__ import annotations

from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ascend.core.context import client_id_ctx_var, request_id_ctx_var


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Populate request.state.request_id, bind the caller's client id, and echo X-Request-Id."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get("X-Request-Id") or str(uuid4())
        request.state.request_id = request_id
        client_id = request.query_params.get("user_id") or request.headers.get("X-Client-Id")
        request_token = request_id_ctx_var.set(request_id)
        client_token = client_id_ctx_var.set(client_id)

        try:
            response = await call_next(request)
        finally:
            client_id_ctx_var.reset(client_token)
            request_id_ctx_var.reset(request_token)

        response.headers["X-Request-Id"] = request_id
        return response
