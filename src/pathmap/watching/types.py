"""Watching domain types."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Literal, Protocol

ChangeKind = Literal["changed", "created"]
WatchState = Literal["idle", "pending_reload"]

ChangeCallback = Callable[[Path, ChangeKind], None]


class Subscription(Protocol):
    """An active filesystem watch that can be torn down."""

    def start(self) -> None: ...

    def dispose(self) -> None: ...


WatchFactory = Callable[[Path, ChangeCallback], Subscription]
