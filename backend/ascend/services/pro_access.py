"""Demo "pro" flag persisted per client."""
from __future__ import annotations

from typing import Any, Dict

from ascend.services.client_storage import PRO_ACCESS_KEY, ClientStorage
from ascend.services.protocol_storage import now_iso


def default_state() -> Dict[str, Any]:
    return {"enabled": False, "mode": "none", "updatedAt": None}


def get_state(storage: ClientStorage) -> Dict[str, Any]:
    raw = storage.get_item(PRO_ACCESS_KEY)
    if not isinstance(raw, dict):
        return default_state()
    updated_at = raw.get("updatedAt")
    return {
        "enabled": bool(raw.get("enabled")),
        "mode": "demo" if raw.get("mode") == "demo" else "none",
        "updatedAt": updated_at if isinstance(updated_at, str) and updated_at.strip() else None,
    }


def set_demo(storage: ClientStorage, enabled: bool) -> Dict[str, Any]:
    state = {"enabled": enabled, "mode": "demo" if enabled else "none", "updatedAt": now_iso()}
    storage.set_item(PRO_ACCESS_KEY, state)
    return state


def toggle_demo(storage: ClientStorage) -> Dict[str, Any]:
    return set_demo(storage, not get_state(storage)["enabled"])
