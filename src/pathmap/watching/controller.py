"""Reloads the prefix mapping when its file changes on disk."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable

from pathmap.infrastructure.config import WatchConfig
from pathmap.infrastructure.debounce import DebounceTimer
from pathmap.infrastructure.logger import logger
from pathmap.remapping.errors import RemapError, WatchSubscriptionFailure
from pathmap.watching.types import ChangeKind, Subscription, WatchFactory, WatchState
from pathmap.watching.watcher import MappingFileWatcher

if TYPE_CHECKING:
    from pathmap.remapping.remapper import PathRemapper


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


class ConfigReloadController:
    """Debounces mapping-file notifications and dispatches on the reload policy.

    Bursts of notifications collapse into one action, taken after the
    debounce delay has passed since the last one, against the file that
    last notification named. Files that are empty at that point are
    skipped: build tools often truncate before rewriting.
    """

    def __init__(
        self,
        remapper: PathRemapper,
        config: WatchConfig | None = None,
        on_restart: Callable[[], Awaitable[None] | None] | None = None,
        watch_factory: WatchFactory = MappingFileWatcher,
    ) -> None:
        self._remapper = remapper
        self._config = config or WatchConfig()
        self._on_restart = on_restart
        self._watch_factory = watch_factory
        self._timer = DebounceTimer(self._config.debounce_s)
        self._subscription: Subscription | None = None
        self._disposed = False

    @property
    def state(self) -> WatchState:
        return "pending_reload" if self._timer.pending else "idle"

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    def start(self) -> None:
        self.on_workspace_folders_changed()

    def on_workspace_folders_changed(self) -> None:
        """Replace the filesystem subscription with one for the current mapping path."""
        if self._disposed:
            return
        self._dispose_subscription()

        mapping_path = self._remapper.mapping_path
        if mapping_path is None:
            logger.warning("No storage directory configured, not watching prefix mapping")
            return

        subscription = self._watch_factory(mapping_path, self.notify)
        try:
            subscription.start()
        except WatchSubscriptionFailure as err:
            logger.warning(err.args[0], **err.details)
            return
        self._subscription = subscription

    def notify(self, path: Path, kind: ChangeKind) -> None:
        """Record a change/create notification and (re)arm the debounce timer."""
        if self._disposed:
            return
        logger.debug("Prefix mapping file event", path=str(path), kind=kind)
        self._timer.schedule(lambda: self.handle_config_file_changed(path))

    async def handle_config_file_changed(self, path: Path) -> None:
        if _file_size(path) <= 0:
            logger.debug("Prefix mapping file is empty or gone, skipping", path=str(path))
            return

        policy = self._config.policy
        if policy == "restart":
            if self._on_restart is None:
                logger.info("Prefix mapping changed, restart requested", path=str(path))
                return
            result = self._on_restart()
            if asyncio.iscoroutine(result):
                await result
        elif policy == "ignore":
            return
        else:
            try:
                self._remapper.reload()
            except RemapError as err:
                logger.warning(err.args[0], **err.details)

    def dispose(self) -> None:
        """Cancel any pending reload and detach from the filesystem."""
        self._disposed = True
        self._timer.clear()
        self._dispose_subscription()

    def _dispose_subscription(self) -> None:
        if self._subscription:
            self._subscription.dispose()
            self._subscription = None
