"""ORM models exposed for metadata discovery."""
from ascend.db.models.storage_entry import StorageEntry
from ascend.db.models.user import User

__all__ = [
    "StorageEntry",
    "User",
]
