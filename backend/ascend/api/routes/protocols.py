"""Private protocol library endpoints."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ascend.api.deps import get_client_storage
from ascend.api.schemas.storage import (
    OpenProtocolResponse,
    PrivateProtocolEntry,
    PrivateProtocolList,
    RenameRequest,
)
from ascend.core.errors import not_found
from ascend.services import protocol_storage
from ascend.services.client_storage import ClientStorage

router = APIRouter(prefix="/protocols", tags=["protocols"])


def _listing(storage: ClientStorage, entries: list) -> PrivateProtocolList:
    return PrivateProtocolList(entries=entries, last_opened_id=protocol_storage.get_last_opened_id(storage))


@router.get("", response_model=PrivateProtocolList, response_model_exclude_none=True)
def list_protocols(storage: ClientStorage = Depends(get_client_storage)) -> PrivateProtocolList:
    return _listing(storage, protocol_storage.list_protocols(storage))


@router.delete("", response_model=PrivateProtocolList, response_model_exclude_none=True)
def clear_protocols(storage: ClientStorage = Depends(get_client_storage)) -> PrivateProtocolList:
    return _listing(storage, protocol_storage.clear_protocols(storage))


@router.post("/migrate", response_model=PrivateProtocolList, response_model_exclude_none=True)
def migrate_protocols(storage: ClientStorage = Depends(get_client_storage)) -> PrivateProtocolList:
    """Import the legacy saved-protocols list once."""
    return _listing(storage, protocol_storage.migrate_legacy_protocols(storage))


@router.get("/active", response_model=Dict[str, Any])
def get_active_protocol(storage: ClientStorage = Depends(get_client_storage)) -> Dict[str, Any]:
    """The protocol most recently generated or opened."""
    protocol = protocol_storage.get_active_protocol(storage)
    if protocol is None:
        raise not_found("No active protocol.")
    return protocol


@router.get("/{entry_id}", response_model=PrivateProtocolEntry, response_model_exclude_none=True)
def get_protocol(entry_id: str, storage: ClientStorage = Depends(get_client_storage)) -> PrivateProtocolEntry:
    entry = protocol_storage.find_protocol(storage, entry_id)
    if entry is None:
        raise not_found("Protocol not found.")
    return PrivateProtocolEntry(**entry)


@router.patch("/{entry_id}", response_model=PrivateProtocolEntry, response_model_exclude_none=True)
def rename_protocol(
    entry_id: str,
    payload: RenameRequest,
    storage: ClientStorage = Depends(get_client_storage),
) -> PrivateProtocolEntry:
    """Set a custom name; an empty name restores the generated title."""
    if protocol_storage.find_protocol(storage, entry_id) is None:
        raise not_found("Protocol not found.")
    entries = protocol_storage.rename_protocol(storage, entry_id, payload.custom_name)
    return PrivateProtocolEntry(**next(entry for entry in entries if entry["id"] == entry_id))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_protocol(entry_id: str, storage: ClientStorage = Depends(get_client_storage)) -> None:
    if protocol_storage.find_protocol(storage, entry_id) is None:
        raise not_found("Protocol not found.")
    protocol_storage.delete_protocol(storage, entry_id)


@router.post("/{entry_id}/open", response_model=OpenProtocolResponse, response_model_exclude_none=True)
def open_protocol(entry_id: str, storage: ClientStorage = Depends(get_client_storage)) -> OpenProtocolResponse:
    entry = protocol_storage.find_protocol(storage, entry_id)
    if entry is None:
        raise not_found("Protocol not found.")
    protocol_storage.open_protocol(storage, entry)
    return OpenProtocolResponse(entry=PrivateProtocolEntry(**entry), last_opened_id=entry["id"])
