#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Recording group classification for the Recorder Ingest Tool.

Recorders split long sessions into several files. Two passes put them back
together:

1. Device fragments named ``<PREFIX>_<seq>_<date>_<time>.<ext>`` are chained
   by consecutive sequence numbers, as long as the previous fragment hit the
   recorder's split size or the two were created close together. A chain is
   named ``<PREFIX>_<date>_<time>`` after its first fragment.
2. Everything else is grouped by base name (the name without a trailing
   ``_N``, `` N`` or ``(N)``) and only merged when the base name carries a
   recorder vendor token or the trailing numbers form a tight sequence.
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .config import SEQUENCE_GAP_MAX, SEQUENCE_GAP_MIN
from .models.options import GroupingRules
from .models.recording import RecordingGroup, SourceFile, extract_base_name, parse_fragment_name

TRAILING_NUMBER_RE = re.compile(r"\d+$")


@dataclass
class _Fragment:
    file: SourceFile
    sequence: int
    timestamp_key: str
    base_name: str


class RecordingGroupClassifier:
    """Partition discovered files into logical recordings. Reads metadata only."""

    def __init__(self, rules: Optional[GroupingRules] = None, logger: Optional[logging.Logger] = None):
        self.rules = rules or GroupingRules()
        self.logger = logger or logging.getLogger(__name__)

    def group(self, files: Iterable[SourceFile]) -> List[RecordingGroup]:
        unique: Dict[str, SourceFile] = {}
        for f in files:
            unique.setdefault(str(f.path), f)

        raw = [f for f in unique.values() if self._is_raw(f)]
        fragments: List[_Fragment] = []
        generic: List[SourceFile] = []
        for f in raw:
            parsed = parse_fragment_name(f.name)
            if parsed is None:
                generic.append(f)
            else:
                fragments.append(_Fragment(f, parsed.sequence, parsed.timestamp_key, parsed.base_name))

        groups = self._group_fragments(fragments) + self._group_by_base_name(generic)
        groups.sort(key=lambda g: (g.base_name, g.first_name))

        merged = sum(1 for g in groups if g.should_merge)
        self.logger.info("Created %d recording groups (%d to merge) from %d files",
                         len(groups), merged, len(raw))
        return groups

    def _is_raw(self, f: SourceFile) -> bool:
        return f.suffix.lower() == self.rules.raw_extension.lower()

    # Device fragments

    def _continues(self, last: _Fragment, candidate: _Fragment) -> bool:
        if last.sequence + 1 != candidate.sequence:
            return False
        if last.file.size_bytes >= self.rules.large_file_bytes:
            return True
        a, b = last.file.created_at, candidate.file.created_at
        if a is None or b is None:
            return False
        return abs((b - a).total_seconds()) <= self.rules.proximity_seconds

    def _group_fragments(self, fragments: List[_Fragment]) -> List[RecordingGroup]:
        if not fragments:
            return []

        # Single pass, first fit against the most recently opened chain
        chains: List[List[_Fragment]] = []
        for candidate in sorted(fragments, key=lambda c: (c.sequence, c.file.name)):
            for chain in reversed(chains):
                if self._continues(chain[-1], candidate):
                    chain.append(candidate)
                    break
            else:
                chains.append([candidate])
                self.logger.debug("Opened fragment chain %s/%d at %s",
                                  candidate.timestamp_key, candidate.sequence, candidate.file.name)

        # A large singleton whose continuation went to a more recent chain stays standalone
        sequences = {c.sequence for c in fragments}
        for chain in chains:
            head = chain[0]
            if (len(chain) == 1 and head.file.size_bytes >= self.rules.large_file_bytes
                    and head.sequence + 1 in sequences):
                self.logger.debug("No continuation claimed by %s; keeping it standalone", head.file.name)

        return [RecordingGroup((c.file for c in chain), base_name=chain[0].base_name) for chain in chains]

    # Generic base-name grouping

    def _group_by_base_name(self, files: List[SourceFile]) -> List[RecordingGroup]:
        by_base: Dict[str, List[SourceFile]] = defaultdict(list)
        for f in files:
            by_base[extract_base_name(f.name)].append(f)

        groups: List[RecordingGroup] = []
        for base_name, members in by_base.items():
            if len(members) > 1 and self._should_merge(base_name, members):
                groups.append(RecordingGroup(members))
            else:
                groups.extend(RecordingGroup([f]) for f in members)
        return groups

    def _should_merge(self, base_name: str, files: List[SourceFile]) -> bool:
        lowered = base_name.lower()
        if any(token in lowered for token in self.rules.vendor_tokens):
            return True
        return has_sequential_naming(files)


def has_sequential_naming(files: Iterable[SourceFile]) -> bool:
    """True when every name ends in a number and sorted numbers step by 1..10."""
    numbers = []
    for f in sorted(files, key=lambda f: f.name):
        m = TRAILING_NUMBER_RE.search(f.stem)
        if not m:
            return False
        numbers.append(int(m.group()))
    if len(numbers) < 2:
        return False
    numbers.sort()
    return all(SEQUENCE_GAP_MIN <= b - a <= SEQUENCE_GAP_MAX for a, b in zip(numbers, numbers[1:]))


def group_recordings(files: Iterable[SourceFile], rules: Optional[GroupingRules] = None) -> List[RecordingGroup]:
    """Convenience wrapper around RecordingGroupClassifier."""
    return RecordingGroupClassifier(rules).group(files)
