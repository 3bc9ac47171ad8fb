"""Tests for the path remapper."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pathmap.infrastructure.config import MAPPING_FILE_NAME
from pathmap.remapping.errors import MappingFileMalformed, MappingFileUnreadable, RemapError
from pathmap.remapping.remapper import PathRemapper


class TestReload:
    def test_mapping_path(self, storage_dir):
        remapper = PathRemapper(storage_dir)
        assert remapper.mapping_path == storage_dir / MAPPING_FILE_NAME

    def test_no_storage_dir_is_not_an_error(self):
        remapper = PathRemapper()
        assert remapper.mapping_path is None
        assert remapper.reload() == 0
        assert remapper.prefix_count == 0

    def test_missing_file_is_not_an_error(self, storage_dir):
        remapper = PathRemapper(storage_dir)
        assert remapper.reload() == 0
        assert remapper.resolve("/sandbox/src/a.h") == "/sandbox/src/a.h"

    def test_loads_prefixes(self, storage_dir, write_mapping):
        write_mapping({"/sandbox/src": "/home/dev/project", "/sandbox/lib": "/home/dev/lib"})
        remapper = PathRemapper(storage_dir)
        assert remapper.reload() == 2
        assert remapper.prefix_count == 2

    def test_missing_file_keeps_previous_mapping(self, storage_dir, write_mapping):
        path = write_mapping({"/sandbox/src": "/home/dev/project"})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        path.unlink()
        remapper.reload()
        assert remapper.prefix_count == 1

    def test_reload_replaces_rather_than_merges(self, storage_dir, write_mapping):
        write_mapping({"/sandbox/a": "/real/a"})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        write_mapping({"/sandbox/b": "/real/b"})
        remapper.reload()
        assert remapper.prefix_count == 1

    def test_invalid_json_raises_and_keeps_previous_mapping(self, storage_dir, write_mapping):
        path = write_mapping({"/sandbox/src": "/home/dev/project"})
        remapper = PathRemapper(storage_dir)
        remapper.reload()

        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(MappingFileMalformed) as exc_info:
            remapper.reload()
        assert exc_info.value.details["path"] == str(path)
        assert remapper.prefix_count == 1

    @pytest.mark.parametrize("content", ['["/a", "/b"]', '{"/a": 1}', '{"/a": null}', '"text"'])
    def test_wrong_shape_is_malformed(self, storage_dir, content):
        (storage_dir / MAPPING_FILE_NAME).write_text(content, encoding="utf-8")
        remapper = PathRemapper(storage_dir)
        with pytest.raises(MappingFileMalformed):
            remapper.reload()
        assert remapper.prefix_count == 0

    def test_undecodable_bytes_are_malformed(self, storage_dir, write_mapping):
        path = write_mapping({"/sandbox/src": "/home/dev/project"})
        remapper = PathRemapper(storage_dir)
        remapper.reload()

        path.write_bytes(b"\xff\xfe")
        with pytest.raises(MappingFileMalformed):
            remapper.reload()
        assert remapper.prefix_count == 1

    def test_unreadable_file(self, storage_dir):
        # A directory at the mapping path exists but cannot be read as text.
        (storage_dir / MAPPING_FILE_NAME).mkdir()
        remapper = PathRemapper(storage_dir)
        with pytest.raises(MappingFileUnreadable):
            remapper.reload()

    def test_errors_share_base_class(self):
        assert issubclass(MappingFileMalformed, RemapError)
        assert issubclass(MappingFileUnreadable, RemapError)

    def test_storage_dir_set_late(self, tmp_path, write_mapping, storage_dir):
        write_mapping({"/sandbox/src": "/home/dev/project"})
        remapper = PathRemapper()
        remapper.set_storage_dir(storage_dir)
        assert remapper.reload() == 1

    def test_reload_is_idempotent(self, storage_dir, write_mapping, real_root):
        write_mapping({"/sandbox/src": str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        first = remapper.resolve("/sandbox/src/foo/bar.h")
        remapper.reload()
        assert remapper.resolve("/sandbox/src/foo/bar.h") == first
        assert remapper.prefix_count == 1


class TestResolve:
    def test_remaps_when_target_exists(self, storage_dir, write_mapping, real_root):
        write_mapping({"/sandbox/src": str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve("/sandbox/src/foo/bar.h") == str(real_root / "foo" / "bar.h")

    def test_returns_original_when_target_missing(self, storage_dir, write_mapping, real_root):
        write_mapping({"/sandbox/src": str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve("/sandbox/src/foo/missing.h") == "/sandbox/src/foo/missing.h"

    def test_returns_original_when_no_prefix_matches(self, storage_dir, write_mapping, real_root):
        write_mapping({"/sandbox/src": str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve("/usr/include/stdio.h") == "/usr/include/stdio.h"

    def test_without_mapping_file_returns_original(self, storage_dir):
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve("/sandbox/src/foo/bar.h") == "/sandbox/src/foo/bar.h"

    def test_resolves_symlinks_before_lookup(self, tmp_path, storage_dir, write_mapping, real_root):
        sandbox = tmp_path.resolve() / "sandbox" / "src"
        (sandbox / "foo").mkdir(parents=True)
        (sandbox / "foo" / "bar.h").write_text("")
        alias = tmp_path.resolve() / "alias"
        os.symlink(sandbox, alias)

        write_mapping({str(sandbox): str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve(str(alias / "foo" / "bar.h")) == str(real_root / "foo" / "bar.h")

    def test_unmatched_symlink_returns_path_as_received(self, tmp_path, storage_dir, write_mapping, real_root):
        target = tmp_path.resolve() / "elsewhere.h"
        target.write_text("")
        link = tmp_path.resolve() / "link.h"
        os.symlink(target, link)

        write_mapping({"/sandbox/src": str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve(str(link)) == str(link)

    def test_canonicalization_failure_returns_original(self, storage_dir):
        remapper = PathRemapper(storage_dir)
        assert remapper.resolve("/sandbox/\x00bad") == "/sandbox/\x00bad"

    def test_replaces_first_occurrence_only(self, storage_dir, write_mapping, tmp_path):
        real = tmp_path.resolve() / "real"
        (real / "sandbox").mkdir(parents=True)
        (real / "sandbox" / "a.h").write_text("")
        write_mapping({"/sandbox": str(real)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        assert remapper.resolve("/sandbox/sandbox/a.h") == str(real / "sandbox" / "a.h")

    def test_reader_keeps_snapshot_during_reload(self, storage_dir, write_mapping, real_root):
        write_mapping({"/sandbox/src": str(real_root)})
        remapper = PathRemapper(storage_dir)
        remapper.reload()
        old_trie = remapper._trie

        write_mapping({"/other": "/elsewhere"})
        remapper.reload()
        assert remapper._trie is not old_trie
        assert old_trie.longest_match("/sandbox/src/foo/bar.h").replacement == str(real_root)
