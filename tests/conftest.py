"""Shared fixtures for pathmap tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from pathmap.infrastructure.config import MAPPING_FILE_NAME


@pytest.fixture()
def storage_dir(tmp_path: Path) -> Path:
    """Storage directory for completion_prefix_map.json, symlinks resolved."""
    directory = tmp_path.resolve() / "storage"
    directory.mkdir()
    return directory


@pytest.fixture()
def write_mapping(storage_dir: Path) -> Callable[[dict[str, str]], Path]:
    """Write a mapping document into the storage directory."""

    def _write(mapping: dict[str, str]) -> Path:
        path = storage_dir / MAPPING_FILE_NAME
        path.write_text(json.dumps(mapping), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def real_root(tmp_path: Path) -> Path:
    """Developer-side project root with a header at foo/bar.h."""
    root = tmp_path.resolve() / "home" / "dev" / "project"
    (root / "foo").mkdir(parents=True)
    (root / "foo" / "bar.h").write_text("#pragma once\n")
    return root
