"""Rewrites sandbox paths to paths that exist on the developer's machine."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import ValidationError

from pathmap.infrastructure.config import MAPPING_FILE_NAME
from pathmap.infrastructure.logger import logger
from pathmap.remapping.errors import MappingFileMalformed, MappingFileUnreadable
from pathmap.remapping.trie import PrefixTrie
from pathmap.remapping.types import MappingDocument


class PathRemapper:
    """Holds the current prefix trie and resolves paths against it.

    reload() is the only writer. It builds a new trie and publishes it with
    a single assignment, so resolve() always sees a complete trie.
    """

    def __init__(self, storage_dir: str | Path | None = None) -> None:
        self._storage_dir: Path | None = Path(storage_dir) if storage_dir is not None else None
        self._trie = PrefixTrie()

    @property
    def storage_dir(self) -> Path | None:
        return self._storage_dir

    def set_storage_dir(self, storage_dir: str | Path) -> None:
        """Point at a new storage directory. Callers reload() afterwards."""
        self._storage_dir = Path(storage_dir)

    @property
    def mapping_path(self) -> Path | None:
        if self._storage_dir is None:
            return None
        return self._storage_dir / MAPPING_FILE_NAME

    @property
    def prefix_count(self) -> int:
        return len(self._trie)

    def reload(self) -> int:
        """Rebuild the trie from the mapping file.

        A missing file (or no storage directory) leaves the current trie in
        place. On a read or parse error the current trie is kept as well and
        the error is raised.

        Returns:
            Number of prefixes loaded, 0 if nothing was loaded.

        Raises:
            MappingFileUnreadable: The file exists but reading it failed.
            MappingFileMalformed: The file is not a JSON object of strings.
        """
        mapping_path = self.mapping_path
        if mapping_path is None or not mapping_path.exists():
            logger.debug("No prefix mapping file, keeping current mapping", path=str(mapping_path))
            return 0

        try:
            content = mapping_path.read_bytes()
        except OSError as err:
            raise MappingFileUnreadable(
                "Could not read prefix mapping file", {"path": str(mapping_path), "error": str(err)}
            ) from err

        try:
            document = MappingDocument.model_validate_json(content)
        except ValidationError as err:
            raise MappingFileMalformed(
                "Malformed prefix mapping file",
                {"path": str(mapping_path), "errors": err.error_count()},
            ) from err
        except ValueError as err:
            # Undecodable bytes, if the JSON parser reports them outside a ValidationError.
            raise MappingFileMalformed(
                "Malformed prefix mapping file", {"path": str(mapping_path), "error": str(err)}
            ) from err

        self._trie = PrefixTrie.from_mapping(document.root)
        logger.info("Loaded prefix mapping", path=str(mapping_path), count=len(self._trie))
        return len(self._trie)

    def resolve(self, absolute_path: str) -> str:
        """Return absolute_path rewritten through the mapping, if the result exists.

        Lookup happens on the symlink-resolved form of the path. The original
        path is returned unchanged when canonicalization fails, no prefix
        matches, or the rewritten path does not exist.
        """
        trie = self._trie
        try:
            canonical = os.path.realpath(absolute_path)
        except (OSError, ValueError):
            logger.debug("Could not canonicalize path", path=absolute_path)
            return absolute_path

        match = trie.longest_match(canonical)
        if match is None:
            return absolute_path

        candidate = canonical.replace(match.prefix, match.replacement, 1)
        if os.path.exists(candidate):
            return candidate
        return absolute_path
