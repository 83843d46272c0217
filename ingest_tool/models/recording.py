#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for discovered recordings and recording groups.
"""

import os
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Tuple

from ..config import MERGED_SUFFIX
from ..utils.size import format_bytes
from ..utils.time import from_timestamp

# <PREFIX>_<seq>_<date>_<time>.<ext>, e.g. DJI_01_20250101_100000.WAV
FRAGMENT_NAME_RE = re.compile(
    r"^(?P<prefix>[A-Za-z0-9]+)_(?P<seq>\d{1,4})_(?P<date>\d{8})_(?P<time>\d{6})\.(?P<ext>[A-Za-z0-9]+)$"
)

# Sequence suffixes stripped to find the recording identity; first match wins
BASE_NAME_PATTERNS = (
    re.compile(r"_\d+$"),
    re.compile(r"\s\d+$"),
    re.compile(r"\(\d+\)$"),
)


@dataclass(frozen=True)
class FragmentName:
    """Parsed recorder fragment name."""
    prefix: str
    sequence: int
    timestamp_key: str

    @property
    def base_name(self) -> str:
        """Recording identity without the per-fragment sequence: ``DJI_20250101_100000``."""
        return f"{self.prefix}_{self.timestamp_key}"


def parse_fragment_name(file_name: str) -> Optional[FragmentName]:
    m = FRAGMENT_NAME_RE.match(file_name)
    if not m:
        return None
    return FragmentName(
        prefix=m.group("prefix"),
        sequence=int(m.group("seq")),
        timestamp_key=f"{m.group('date')}_{m.group('time')}",
    )


def extract_base_name(file_name: str) -> str:
    """
    Strip the extension and a trailing sequence marker.

    'DJI_001.WAV' -> 'DJI', 'Meeting 2.wav' -> 'Meeting', 'Memo(3).wav' -> 'Memo'
    """
    stem = Path(file_name).stem
    for pattern in BASE_NAME_PATTERNS:
        stripped = pattern.sub("", stem)
        if stripped != stem:
            return stripped.strip()
    return stem


@dataclass(frozen=True)
class SourceFile:
    """Snapshot of an audio file taken at discovery time."""
    path: Path
    size_bytes: int
    created_at: Optional[datetime] = None
    sequence: Optional[int] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def suffix(self) -> str:
        return self.path.suffix

    @classmethod
    def from_path(cls, path: Path, stat_result: Optional[os.stat_result] = None) -> 'SourceFile':
        """Stat the file once and record size, creation time and sequence number."""
        path = Path(path)
        st = stat_result or path.stat()
        fragment = parse_fragment_name(path.name)
        return cls(
            path=path,
            size_bytes=st.st_size,
            # Only real birth times count; mtime is not a creation time
            created_at=from_timestamp(getattr(st, "st_birthtime", None)),
            sequence=fragment.sequence if fragment else None,
        )

    def relocated(self, new_path: Path) -> 'SourceFile':
        """Same recording metadata at a different location (e.g. a staged copy)."""
        new_path = Path(new_path)
        fragment = parse_fragment_name(new_path.name)
        return replace(self, path=new_path, sequence=fragment.sequence if fragment else None)


@dataclass(frozen=True)
class RecordingGroup:
    """Ordered, non-empty set of fragments of one logical recording."""
    files: Tuple[SourceFile, ...]
    base_name: str = field(init=False)

    def __init__(self, files: Iterable[SourceFile], base_name: Optional[str] = None):
        ordered = tuple(sorted(files, key=lambda f: f.name))
        if not ordered:
            raise ValueError("RecordingGroup requires at least one file")
        object.__setattr__(self, "files", ordered)
        object.__setattr__(self, "base_name", base_name or extract_base_name(ordered[0].name))

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def should_merge(self) -> bool:
        return len(self.files) > 1

    @property
    def first_name(self) -> str:
        return self.files[0].name

    def output_file_name(self, extension: str) -> str:
        ext = extension if extension.startswith(".") else f".{extension}"
        if len(self.files) == 1:
            return f"{self.files[0].stem}{ext}"
        return f"{self.base_name}{MERGED_SUFFIX}{ext}"

    @property
    def description(self) -> str:
        if len(self.files) == 1:
            return self.files[0].name
        return f"{self.base_name} ({len(self.files)} files, {format_bytes(self.total_size)})"

    def split(self) -> Tuple['RecordingGroup', ...]:
        """One standalone group per member."""
        return tuple(RecordingGroup([f]) for f in self.files)
