"""API error taxonomy and exception handlers."""
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

MISSING_QUERY = "MISSING_QUERY"
INVALID_DURATION = "INVALID_DURATION"
MISSING_PROFILE = "MISSING_PROFILE"
INVALID_PROFILE = "INVALID_PROFILE"
INVALID_BODY = "INVALID_BODY"
NOT_FOUND = "NOT_FOUND"
AI_TIMEOUT = "AI_TIMEOUT"
INVALID_JSON = "INVALID_JSON"


class ApiError(HTTPException):
    """HTTPException that also carries a machine-readable code for UI message mapping."""

    def __init__(self, status_code: int, message: str, code: str, *, details: list[str] | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.details = details or []

    def to_payload(self) -> dict:
        payload: dict = {"error": self.detail, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


def bad_request(message: str, code: str, *, details: list[str] | None = None) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, message, code, details=details)


def not_found(message: str) -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, message, NOT_FOUND)


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.info("Request rejected (%s): %s", exc.code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Malformed request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "code": INVALID_BODY},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
