"""Shared route dependencies."""
from __future__ import annotations

from uuid import UUID

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from ascend.db.deps import get_db
from ascend.services.client_storage import ClientStorage


def get_client_storage(
    user_id: UUID = Query(..., description="Client id that owns the stored state"),
    db: Session = Depends(get_db),
) -> ClientStorage:
    return ClientStorage.for_user(db, user_id)
