#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Job state and result structures.
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List


class TransferState(str, Enum):
    IDLE = "idle"
    TRANSFERRING = "transferring"
    PROCESSING = "processing"
    ERROR = "error"


class Disposition(str, Enum):
    """What happened to one staged input file."""
    CONSOLIDATED = "consolidated"   # data secured in an output file
    DELETED_SMALL = "deleted_small"
    SKIPPED = "skipped"             # its group failed; data only in the input
    FALLBACK = "fallback"           # raw file moved into the destination


@dataclass(frozen=True)
class TransferResult:
    """Summary counters for one job."""
    transferred: int = 0
    processed: int = 0
    merged: int = 0
    deleted_small: int = 0
    skipped: int = 0
    errored: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class ProcessingSummary:
    """Accumulated outcome of one IngestionPipeline run."""
    processed_files: List[Path] = field(default_factory=list)
    merged_files: List[Path] = field(default_factory=list)
    deleted_small_files: List[Path] = field(default_factory=list)
    skipped_files: List[Path] = field(default_factory=list)
    dispositions: Dict[Path, Disposition] = field(default_factory=dict)
    inputs_by_output: Dict[Path, List[Path]] = field(default_factory=dict)
    total_processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed": [str(p) for p in self.processed_files],
            "merged": [str(p) for p in self.merged_files],
            "deleted_small": [str(p) for p in self.deleted_small_files],
            "skipped": [str(p) for p in self.skipped_files],
            "total_processing_time": round(self.total_processing_time, 3),
        }
