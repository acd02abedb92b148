"""Sign-in availability."""
from __future__ import annotations

from fastapi import APIRouter

from ascend.api.schemas.storage import AuthStatus
from ascend.core.config import settings

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/status", response_model=AuthStatus)
def auth_status() -> AuthStatus:
    """Google sign-in is offered only when both Supabase settings are present."""
    return AuthStatus(enabled=settings.auth_enabled)
