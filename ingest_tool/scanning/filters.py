#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Small-file filter: drops junk recordings below a byte threshold.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..models.recording import SourceFile
from ..utils.size import format_bytes


@dataclass
class FilterResult:
    kept: List[SourceFile] = field(default_factory=list)
    removed: List[SourceFile] = field(default_factory=list)

    def __iter__(self):
        # allows ``kept, removed = SmallFileFilter().filter(...)``
        return iter((self.kept, self.removed))


class SmallFileFilter:
    """Compares the current on-disk size of each file against a threshold."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def filter(self, files: Iterable[SourceFile], threshold_bytes: int, delete: bool) -> FilterResult:
        result = FilterResult()
        for f in files:
            try:
                size = os.stat(f.path).st_size
            except OSError as e:
                # Unknown size: keep the file rather than risk losing a recording
                self.logger.warning("Failed to check file size for %s: %s", f.name, e)
                result.kept.append(f)
                continue

            if size >= threshold_bytes:
                result.kept.append(f)
                continue

            self.logger.info("Small file detected: %s (%s)", f.name, format_bytes(size))
            if not delete:
                result.kept.append(f)
                continue

            try:
                os.remove(f.path)
            except OSError as e:
                self.logger.error("Failed to delete small file %s: %s", f.name, e)
                result.kept.append(f)
                continue
            self.logger.info("Deleted small file: %s", f.name)
            result.removed.append(f)

        return result
