"""Shared schema base classes."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialize with the camelCase keys the web client expects; accept either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
