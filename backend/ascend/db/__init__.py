"""Database utilities and models."""

from ascend.db.base import Base
from ascend.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
