"""Mapping file watcher: forwards change/create events for one file."""

from __future__ import annotations

import asyncio
from pathlib import Path

from watchfiles import Change, awatch

from pathmap.infrastructure.logger import logger
from pathmap.remapping.errors import WatchSubscriptionFailure
from pathmap.watching.types import ChangeCallback, ChangeKind

_CHANGE_KINDS: dict[Change, ChangeKind] = {
    Change.added: "created",
    Change.modified: "changed",
}


def to_change_kind(change: Change) -> ChangeKind | None:
    """Map a watchfiles change to a notification kind; deletions map to None."""
    return _CHANGE_KINDS.get(change)


class MappingFileWatcher:
    """Watches the mapping file's directory so that creation is seen too."""

    def __init__(self, mapping_path: Path, on_change: ChangeCallback) -> None:
        self._mapping_path = mapping_path
        self._on_change = on_change
        self._watch_task: asyncio.Task[None] | None = None

    @property
    def mapping_path(self) -> Path:
        return self._mapping_path

    @property
    def active(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    def start(self) -> None:
        watch_dir = self._mapping_path.parent
        if not watch_dir.is_dir():
            raise WatchSubscriptionFailure(
                "Mapping file directory does not exist, not watching for changes", {"path": str(watch_dir)}
            )
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.debug("Mapping file watcher started", path=str(self._mapping_path))

    def dispose(self) -> None:
        if self._watch_task:
            self._watch_task.cancel()
            self._watch_task = None

    def _is_mapping_file(self, _change: Change, path: str) -> bool:
        return Path(path).name == self._mapping_path.name

    def dispatch(self, changes: set[tuple[Change, str]]) -> None:
        """Forward a batch of raw changes to the callback."""
        for change, path in sorted(changes):
            kind = to_change_kind(change)
            if kind is None:
                continue
            self._on_change(Path(path), kind)

    async def _watch_loop(self) -> None:
        try:
            async for changes in awatch(
                str(self._mapping_path.parent), watch_filter=self._is_mapping_file, recursive=False
            ):
                self.dispatch(changes)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Mapping file watch failed, changes will not be picked up", path=str(self._mapping_path))
