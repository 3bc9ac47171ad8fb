"""Remapping domain types."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, RootModel

# "restart" hands off to the host; "ignore" drops changes; "prompt" reloads the mapping.
ReloadPolicy = Literal["restart", "ignore", "prompt"]


class MappingDocument(RootModel[dict[str, str]]):
    """Contents of completion_prefix_map.json: sandbox prefix -> real prefix."""


class PrefixMatch(BaseModel):
    prefix: str  # Consumed segments joined by "/"
    replacement: str
