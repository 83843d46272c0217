#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for discovery and the small-file filter.
"""

import logging
import os

import pytest

from ingest_tool.errors import MissingFileError
from ingest_tool.models.recording import SourceFile
from ingest_tool.scanning import FileDiscovery, SmallFileFilter
from ingest_tool.tests.fixtures.volume_setup import make_file, make_volume

THRESHOLD = 5 * 1024 * 1024


class TestSmallFileFilter:
    """Strict < comparison against the threshold."""

    @pytest.fixture
    def files(self, tmp_path):
        return {
            "exact": SourceFile.from_path(make_file(tmp_path / "exact.wav", THRESHOLD)),
            "below": SourceFile.from_path(make_file(tmp_path / "below.wav", THRESHOLD - 1)),
            "large": SourceFile.from_path(make_file(tmp_path / "large.wav", THRESHOLD * 2)),
        }

    def test_threshold_boundary(self, files):
        kept, removed = SmallFileFilter().filter(files.values(), THRESHOLD, delete=True)
        assert {f.name for f in kept} == {"exact.wav", "large.wav"}
        assert [f.name for f in removed] == ["below.wav"]
        assert not files["below"].path.exists()
        assert files["exact"].path.exists()

    def test_advisory_mode_keeps_everything(self, files):
        result = SmallFileFilter().filter(files.values(), THRESHOLD, delete=False)
        assert len(result.kept) == 3
        assert result.removed == []
        assert files["below"].path.exists()

    def test_unknown_size_is_kept(self, tmp_path, caplog):
        ghost = SourceFile(path=tmp_path / "ghost.wav", size_bytes=1)
        with caplog.at_level(logging.WARNING):
            kept, removed = SmallFileFilter().filter([ghost], THRESHOLD, delete=True)
        assert kept == [ghost]
        assert removed == []
        assert "Failed to check file size" in caplog.text

    def test_uses_current_size_not_snapshot(self, tmp_path):
        path = make_file(tmp_path / "grown.wav", 10)
        snapshot = SourceFile.from_path(path)
        make_file(path, THRESHOLD)
        kept, removed = SmallFileFilter().filter([snapshot], THRESHOLD, delete=True)
        assert kept == [snapshot]
        assert path.exists()


class TestFileDiscovery:
    """Recursive raw-audio discovery on a volume."""

    def test_discovers_recursively_sorted(self, tmp_path):
        volume = make_volume(tmp_path / "DJI", {
            "b.WAV": 10,
            "sub/a.wav": 10,
            "notes.txt": 10,
            ".hidden.wav": 10,
            ".Trashes/c.wav": 10,
        })
        found = FileDiscovery().discover_files(volume)
        assert [f.name for f in found] == ["a.wav", "b.WAV"]
        assert all(f.size_bytes == 10 for f in found)

    def test_fragment_sequence_recorded(self, tmp_path):
        volume = make_volume(tmp_path / "DJI", {"DJI_03_20250101_100000.WAV": 1})
        found = FileDiscovery().discover_files(volume)
        assert found[0].sequence == 3

    def test_missing_root(self, tmp_path):
        with pytest.raises(MissingFileError):
            FileDiscovery().discover_files(tmp_path / "nope")

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    def test_unreadable_subfolder_skipped(self, tmp_path):
        volume = make_volume(tmp_path / "DJI", {"ok.wav": 1, "locked/x.wav": 1})
        locked = volume / "locked"
        locked.chmod(0)
        try:
            discovery = FileDiscovery()
            found = discovery.discover_files(volume)
        finally:
            locked.chmod(0o755)
        assert [f.name for f in found] == ["ok.wav"]
        assert discovery.stats["errors"] == 1
