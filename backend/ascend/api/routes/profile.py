"""Stored user profile and demo pro-access flag."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query

from ascend.api.deps import get_client_storage
from ascend.api.schemas.profile import ProfileEnvelope
from ascend.api.schemas.storage import ProAccessState, ProAccessUpdate
from ascend.core.errors import INVALID_PROFILE, bad_request
from ascend.observability.metrics import log_metric
from ascend.services import pro_access
from ascend.services.client_storage import ClientStorage
from ascend.services.goal_archetypes import normalize_locale
from ascend.services.profile_service import (
    create_default_profile,
    read_stored_profile,
    save_stored_profile,
    to_display_height,
    to_display_weight,
    validate_profile,
    validate_profile_types,
)

router = APIRouter()


def _envelope(profile: Dict[str, Any], locale: str) -> ProfileEnvelope:
    errors = validate_profile(profile, locale)  # type: ignore[arg-type]
    return ProfileEnvelope(
        profile=profile,
        complete=not errors,
        errors=errors,
        display_height=round(to_display_height(profile), 1),
        display_weight=round(to_display_weight(profile), 1),
    )


@router.get("/profile", response_model=ProfileEnvelope, response_model_exclude_none=True, tags=["profile"])
def get_profile(
    locale: str = Query("ar"),
    storage: ClientStorage = Depends(get_client_storage),
) -> ProfileEnvelope:
    """Return the saved profile, or the default one marked incomplete."""
    stored = read_stored_profile(storage)
    profile = {**create_default_profile(), **stored} if stored else create_default_profile()
    return _envelope(profile, normalize_locale(locale))


@router.put("/profile", response_model=ProfileEnvelope, response_model_exclude_none=True, tags=["profile"])
def put_profile(
    profile: Dict[str, Any] = Body(...),
    locale: str = Query("ar"),
    storage: ClientStorage = Depends(get_client_storage),
) -> ProfileEnvelope:
    clean_locale = normalize_locale(locale)
    merged = {**create_default_profile(), **profile}
    errors = validate_profile(merged, clean_locale) or validate_profile_types(merged, clean_locale)
    if errors:
        log_metric("profile.save.rejected", len(errors))
        raise bad_request("Profile is incomplete.", INVALID_PROFILE, details=errors)
    save_stored_profile(storage, merged)
    log_metric("profile.save.success", 1)
    return _envelope(merged, clean_locale)


@router.get("/pro-access", response_model=ProAccessState, tags=["pro-access"])
def get_pro_access(storage: ClientStorage = Depends(get_client_storage)) -> ProAccessState:
    return ProAccessState(**pro_access.get_state(storage))


@router.put("/pro-access", response_model=ProAccessState, tags=["pro-access"])
def put_pro_access(
    payload: ProAccessUpdate,
    storage: ClientStorage = Depends(get_client_storage),
) -> ProAccessState:
    return ProAccessState(**pro_access.set_demo(storage, payload.enabled))


@router.post("/pro-access/toggle", response_model=ProAccessState, tags=["pro-access"])
def toggle_pro_access(storage: ClientStorage = Depends(get_client_storage)) -> ProAccessState:
    return ProAccessState(**pro_access.toggle_demo(storage))
