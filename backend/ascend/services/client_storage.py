"""Server-side replacement for the browser's localStorage/sessionStorage."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ascend.db.models.storage_entry import StorageEntry
from ascend.db.models.user import User

logger = logging.getLogger(__name__)

USER_PROFILE_KEY = "user-profile.v1"
PRIVATE_PROTOCOLS_KEY = "private-protocols.v1"
LAST_OPENED_PRIVATE_PROTOCOL_ID_KEY = "private-protocols.v1.last-opened-id"
PRIVATE_PROTOCOLS_MIGRATED_KEY = "private-protocols.v1.migrated"
LEGACY_SAVED_PROTOCOLS_KEY = "saved-protocols"
SESSION_PROTOCOL_KEY = "ai-protocol"
PLANNER_QA_KEY = "planner-qa.v1"
PLANNER_SESSION_KEY = "planner-session.v1"
PRO_ACCESS_KEY = "pro-access.v1"
GENERATION_TASK_KEY = "generation-task.v1"


class ClientStorage:
    """
    Key-value storage scoped to one user.

    Values are JSON documents. Every write commits immediately, mirroring the
    synchronous semantics of browser storage the original client relied on.
    """

    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id

    @classmethod
    def for_user(cls, db: Session, user_id: UUID) -> "ClientStorage":
        _ensure_user(db, user_id)
        return cls(db, user_id)

    def get_item(self, key: str) -> Any | None:
        entry = self._entry(key)
        return entry.value if entry is not None else None

    def set_item(self, key: str, value: Any) -> None:
        entry = self._entry(key)
        if entry is None:
            entry = StorageEntry(user_id=self.user_id, key=key, value=value)
        else:
            entry.value = value
        self.db.add(entry)
        self.db.commit()

    def remove_item(self, key: str) -> None:
        entry = self._entry(key)
        if entry is None:
            return
        self.db.delete(entry)
        self.db.commit()

    def _entry(self, key: str) -> StorageEntry | None:
        return (
            self.db.query(StorageEntry)
            .filter(StorageEntry.user_id == self.user_id, StorageEntry.key == key)
            .one_or_none()
        )


def _ensure_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    now = datetime.now(timezone.utc)
    if user:
        user.last_seen_at = now
        db.add(user)
        db.commit()
        return user

    user = User(id=user_id, last_seen_at=now)
    db.add(user)
    try:
        db.commit()
        return user
    except IntegrityError:
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        logger.error("Could not create storage owner %s", user_id)
        raise
