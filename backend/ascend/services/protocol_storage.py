"""Private protocol library: the saved-plans list, last-opened pointer and legacy migration."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ascend.services.client_storage import (
    LAST_OPENED_PRIVATE_PROTOCOL_ID_KEY,
    LEGACY_SAVED_PROTOCOLS_KEY,
    PRIVATE_PROTOCOLS_KEY,
    PRIVATE_PROTOCOLS_MIGRATED_KEY,
    SESSION_PROTOCOL_KEY,
    ClientStorage,
)

logger = logging.getLogger(__name__)

MAX_PRIVATE_PROTOCOLS = 25
DEFAULT_TITLE = "AI Protocol"
DEFAULT_TITLE_AR = "بروتوكول ذكاء اصطناعي"

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_iso(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def new_entry_id(created_at: Optional[str] = None) -> str:
    millis = int(_parse_iso(created_at).timestamp() * 1000) if created_at else int(
        datetime.now(timezone.utc).timestamp() * 1000
    )
    return f"pp-{millis}-{secrets.token_hex(3)}"


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def sanitize_entry(raw: Any) -> Optional[Dict[str, Any]]:
    """Repair a stored entry, or return None when it has no protocol document."""
    if not isinstance(raw, dict) or not isinstance(raw.get("protocol"), dict):
        return None
    protocol: Dict[str, Any] = raw["protocol"]

    title = _text(raw.get("title")) or protocol.get("title") or DEFAULT_TITLE
    title_ar = _text(raw.get("titleAr")) or protocol.get("titleAr") or title
    subtitle = _text(raw.get("subtitle")) or protocol.get("subtitle") or ""
    subtitle_ar = _text(raw.get("subtitleAr")) or protocol.get("subtitleAr") or subtitle

    detailed_days = _number(raw.get("detailedDays"))
    if detailed_days is None:
        detailed_days = len(protocol["days"]) if isinstance(protocol.get("days"), list) else 0
    total_days = _number(raw.get("totalDays"))
    if total_days is None:
        if _number(protocol.get("durationDays")) is not None:
            total_days = protocol["durationDays"]
        elif isinstance(protocol.get("progressData"), list):
            total_days = len(protocol["progressData"])
        else:
            total_days = detailed_days

    created_at = _text(raw.get("createdAt")) or now_iso()
    updated_at = _text(raw.get("updatedAt")) or created_at

    entry: Dict[str, Any] = {
        "id": _text(raw.get("id")) or new_entry_id(created_at),
        "title": title,
        "titleAr": title_ar,
        "subtitle": subtitle,
        "subtitleAr": subtitle_ar,
        "detailedDays": max(0, detailed_days),
        "totalDays": max(0, total_days),
        "createdAt": created_at,
        "updatedAt": updated_at,
        "protocol": protocol,
    }

    plan_mode = raw.get("planMode") if raw.get("planMode") in ("daily", "weekly") else protocol.get("planMode")
    if plan_mode in ("daily", "weekly"):
        entry["planMode"] = plan_mode
    weeks = _number(raw.get("durationWeeks"))
    if weeks is None:
        weeks = _number(protocol.get("durationWeeks"))
    if weeks is not None:
        entry["durationWeeks"] = max(0, weeks)
    if isinstance(raw.get("profileSnapshot"), dict):
        entry["profileSnapshot"] = raw["profileSnapshot"]
    if isinstance(raw.get("qaSummary"), list):
        entry["qaSummary"] = [item for item in raw["qaSummary"] if isinstance(item, str)]
    elif isinstance(protocol.get("qaSummary"), list):
        entry["qaSummary"] = protocol["qaSummary"]
    if isinstance(raw.get("qaHistory"), list):
        entry["qaHistory"] = [item for item in raw["qaHistory"] if isinstance(item, dict)]
    if isinstance(raw.get("customName"), str):
        entry["customName"] = raw["customName"]
    return entry


def _clamp(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    ordered = sorted(entries, key=lambda entry: _parse_iso(entry.get("updatedAt")), reverse=True)
    return ordered[:MAX_PRIVATE_PROTOCOLS]


def _persist(storage: ClientStorage, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    clamped = _clamp(entries)
    storage.set_item(PRIVATE_PROTOCOLS_KEY, clamped)
    return clamped


def _raw_list(storage: ClientStorage, key: str) -> List[Any]:
    raw = storage.get_item(key)
    return raw if isinstance(raw, list) else []


def list_protocols(storage: ClientStorage) -> List[Dict[str, Any]]:
    """Newest first; rewrites storage when corrupt entries had to be dropped."""
    raw_entries = _raw_list(storage, PRIVATE_PROTOCOLS_KEY)
    sanitized = [entry for entry in (sanitize_entry(raw) for raw in raw_entries) if entry is not None]
    if len(sanitized) != len(raw_entries):
        logger.info("Dropped %s invalid private protocol entries", len(raw_entries) - len(sanitized))
        return _persist(storage, sanitized)
    return _clamp(sanitized)


def create_entry(
    protocol: Dict[str, Any],
    *,
    profile_snapshot: Optional[Dict[str, Any]] = None,
    qa_summary: Optional[List[str]] = None,
    qa_history: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    now = now_iso()
    if isinstance(protocol.get("days"), list):
        detailed_days = len(protocol["days"])
    elif isinstance(protocol.get("weeks"), list):
        detailed_days = len(protocol["weeks"])
    else:
        detailed_days = 0
    total_days = len(protocol["progressData"]) if isinstance(protocol.get("progressData"), list) else detailed_days
    duration = _number(protocol.get("durationDays"))
    if duration is not None and duration > 0:
        total_days = duration

    title = protocol.get("title") or DEFAULT_TITLE
    entry: Dict[str, Any] = {
        "id": new_entry_id(),
        "title": title,
        "titleAr": protocol.get("titleAr") or protocol.get("title") or DEFAULT_TITLE_AR,
        "subtitle": protocol.get("subtitle") or "",
        "subtitleAr": protocol.get("subtitleAr") or protocol.get("subtitle") or "",
        "detailedDays": detailed_days,
        "totalDays": total_days,
        "createdAt": now,
        "updatedAt": now,
        "protocol": protocol,
    }
    if protocol.get("planMode") in ("daily", "weekly"):
        entry["planMode"] = protocol["planMode"]
    if protocol.get("durationWeeks") is not None:
        entry["durationWeeks"] = protocol["durationWeeks"]
    if profile_snapshot:
        entry["profileSnapshot"] = profile_snapshot
    if qa_summary:
        entry["qaSummary"] = qa_summary
    elif isinstance(protocol.get("qaSummary"), list):
        entry["qaSummary"] = protocol["qaSummary"]
    if qa_history:
        entry["qaHistory"] = qa_history
    return entry


def upsert_protocol(storage: ClientStorage, entry: Dict[str, Any]) -> List[Dict[str, Any]]:
    current = list_protocols(storage)
    return _persist(storage, [entry] + [item for item in current if item["id"] != entry["id"]])


def delete_protocol(storage: ClientStorage, entry_id: str) -> List[Dict[str, Any]]:
    remaining = [item for item in list_protocols(storage) if item["id"] != entry_id]
    storage.set_item(PRIVATE_PROTOCOLS_KEY, remaining)
    if get_last_opened_id(storage) == entry_id:
        storage.remove_item(LAST_OPENED_PRIVATE_PROTOCOL_ID_KEY)
    return remaining


def rename_protocol(storage: ClientStorage, entry_id: str, custom_name: str) -> List[Dict[str, Any]]:
    """A blank name clears the custom name; either way the entry moves to the top."""
    updated = []
    for entry in list_protocols(storage):
        if entry["id"] == entry_id:
            entry = {key: value for key, value in entry.items() if key != "customName"}
            if custom_name.strip():
                entry["customName"] = custom_name.strip()
            entry["updatedAt"] = now_iso()
        updated.append(entry)
    return _persist(storage, updated)


def clear_protocols(storage: ClientStorage) -> List[Dict[str, Any]]:
    storage.set_item(PRIVATE_PROTOCOLS_KEY, [])
    storage.remove_item(LAST_OPENED_PRIVATE_PROTOCOL_ID_KEY)
    return []


def find_protocol(storage: ClientStorage, entry_id: str) -> Optional[Dict[str, Any]]:
    return next((entry for entry in list_protocols(storage) if entry["id"] == entry_id), None)


def set_last_opened_id(storage: ClientStorage, entry_id: str) -> None:
    storage.set_item(LAST_OPENED_PRIVATE_PROTOCOL_ID_KEY, entry_id)


def get_last_opened_id(storage: ClientStorage) -> Optional[str]:
    value = storage.get_item(LAST_OPENED_PRIVATE_PROTOCOL_ID_KEY)
    return value if isinstance(value, str) else None


def open_protocol(storage: ClientStorage, entry: Dict[str, Any]) -> None:
    """Make the entry the active protocol and remember it as last opened."""
    storage.set_item(SESSION_PROTOCOL_KEY, entry["protocol"])
    set_last_opened_id(storage, entry["id"])


def get_active_protocol(storage: ClientStorage) -> Optional[Dict[str, Any]]:
    value = storage.get_item(SESSION_PROTOCOL_KEY)
    return value if isinstance(value, dict) else None


def _legacy_to_entry(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    return sanitize_entry(
        {
            "id": raw.get("id") if isinstance(raw.get("id"), str) else None,
            "title": raw.get("title"),
            "titleAr": raw.get("titleAr"),
            "subtitle": raw.get("subtitle"),
            "subtitleAr": raw.get("subtitleAr"),
            "detailedDays": raw.get("daysCount"),
            "totalDays": raw.get("totalDays"),
            "createdAt": raw.get("createdAt"),
            "updatedAt": raw.get("createdAt"),
            "protocol": raw.get("protocol"),
        }
    )


def migrate_legacy_protocols(storage: ClientStorage) -> List[Dict[str, Any]]:
    """
    One-time import of the old "saved-protocols" list.

    Only runs while the new library is empty. The migrated flag is set
    whether or not anything was converted.
    """
    current = list_protocols(storage)
    if storage.get_item(PRIVATE_PROTOCOLS_MIGRATED_KEY) == "1":
        return current
    storage.set_item(PRIVATE_PROTOCOLS_MIGRATED_KEY, "1")
    if current:
        return current

    legacy = _raw_list(storage, LEGACY_SAVED_PROTOCOLS_KEY)
    converted = [entry for entry in (_legacy_to_entry(raw) for raw in legacy) if entry is not None]
    if not converted:
        return []
    logger.info("Migrated %s legacy saved protocols", len(converted))
    return _persist(storage, converted)
