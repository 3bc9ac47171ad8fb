"""RemapContext: owns the remapper and its reload controller."""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable

from pathmap.infrastructure.config import STORAGE_DIR, WatchConfig
from pathmap.infrastructure.logger import logger
from pathmap.remapping.errors import RemapError
from pathmap.remapping.remapper import PathRemapper
from pathmap.watching.controller import ConfigReloadController
from pathmap.watching.types import WatchFactory
from pathmap.watching.watcher import MappingFileWatcher


class RemapContext:
    """Composes the remapper and controller and manages their lifecycle."""

    def __init__(
        self,
        storage_dir: str | Path | None = STORAGE_DIR,
        config: WatchConfig | None = None,
        on_restart: Callable[[], Awaitable[None] | None] | None = None,
        watch_factory: WatchFactory = MappingFileWatcher,
    ) -> None:
        self._config = config or WatchConfig()
        self.remapper = PathRemapper(storage_dir)
        self.controller = ConfigReloadController(
            self.remapper, self._config, on_restart=on_restart, watch_factory=watch_factory
        )
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Load the mapping and, unless changes are ignored, start watching it."""
        if self._running:
            logger.debug("Remap context already running, skipping duplicate start")
            return
        self.reload()

        if self._config.policy == "ignore":
            logger.info("Prefix mapping changes are ignored, not watching", path=str(self.remapper.mapping_path))
        else:
            self.controller.start()
        self._running = True

    def reload(self) -> int:
        try:
            return self.remapper.reload()
        except RemapError as err:
            logger.warning(err.args[0], **err.details)
            return 0

    def resolve(self, absolute_path: str) -> str:
        return self.remapper.resolve(absolute_path)

    def workspace_folders_changed(self, storage_dir: str | Path | None = None) -> None:
        """Re-point the storage directory if given, then recreate the watch."""
        if storage_dir is not None and Path(storage_dir) != self.remapper.storage_dir:
            self.remapper.set_storage_dir(storage_dir)
            self.reload()
        if self._running and self._config.policy != "ignore":
            self.controller.on_workspace_folders_changed()

    async def shutdown(self) -> None:
        self.controller.dispose()
        self._running = False
        logger.debug("Remap context shut down")
