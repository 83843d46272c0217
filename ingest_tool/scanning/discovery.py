#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
File discovery logic for the Recorder Ingest Tool.
Handles recursive scanning of a mounted volume to find raw recordings.
"""

import logging
import os
import time
from pathlib import Path
from typing import List, Optional

from ..config import RAW_AUDIO_EXT
from ..errors import MissingFileError, PermissionDeniedError
from ..models.recording import SourceFile
from ..utils.path import is_hidden


class FileDiscovery:
    """Snapshots every raw recording below a root directory."""

    def __init__(self, extension: str = RAW_AUDIO_EXT, logger: Optional[logging.Logger] = None):
        self.extension = extension.lower()
        self.logger = logger or logging.getLogger(__name__)
        self.stats = {}

    def discover_files(self, root: Path) -> List[SourceFile]:
        """
        Discover recordings under ``root``.

        Args:
            root: Mounted volume (or any directory) to scan

        Returns:
            SourceFile snapshots sorted by file name, then path

        Raises:
            MissingFileError: root does not exist or is not a directory
            PermissionDeniedError: root itself cannot be listed
        """
        root = Path(root)
        if not root.is_dir():
            raise MissingFileError(str(root))
        if not os.access(root, os.R_OK | os.X_OK):
            raise PermissionDeniedError(str(root))

        self.stats = {'total_scanned': 0, 'errors': 0, 'audio_files_found': 0}
        found: List[SourceFile] = []

        start_time = time.perf_counter()
        self._scan_recursive(root, found)
        elapsed = time.perf_counter() - start_time

        found.sort(key=lambda f: (f.name, str(f.path)))
        self.logger.info("Discovery complete: %d recordings in %s (%d items scanned in %.1fs, %d errors)",
                         len(found), root, self.stats['total_scanned'], elapsed, self.stats['errors'])
        return found

    def _scan_recursive(self, path: Path, found: List[SourceFile]):
        """Recursively scan a directory; unreadable entries are logged and skipped."""
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    self.stats['total_scanned'] += 1
                    if is_hidden(entry.name):
                        continue
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            self._scan_recursive(Path(entry.path), found)
                        elif entry.is_file(follow_symlinks=False) and self._is_audio_file(entry.name):
                            found.append(SourceFile.from_path(Path(entry.path), entry.stat()))
                            self.stats['audio_files_found'] += 1
                    except OSError as e:
                        self.stats['errors'] += 1
                        self.logger.warning("Error reading %s: %s", entry.path, e)
        except OSError as e:
            self.stats['errors'] += 1
            self.logger.warning("Error accessing %s: %s", path, e)

    def _is_audio_file(self, filename: str) -> bool:
        return Path(filename).suffix.lower() == self.extension


def discover_audio_files(root: Path, extension: str = RAW_AUDIO_EXT) -> List[SourceFile]:
    """Convenience function for recording discovery."""
    return FileDiscovery(extension).discover_files(root)
