"""Errors raised while loading or watching the prefix mapping."""

from __future__ import annotations

from typing import Any


class RemapError(Exception):
    """Base error for expected, non-fatal remapping failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class MappingFileMalformed(RemapError):
    """The mapping file is not a JSON object of string to string."""


class MappingFileUnreadable(RemapError):
    """The mapping file exists but could not be read."""


class WatchSubscriptionFailure(RemapError):
    """The filesystem watch for the mapping file could not be established."""
