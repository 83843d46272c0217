#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Ingestion pipeline: small-file filter -> grouping -> per-group consolidation.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Sequence

from .audio.consolidator import AudioConsolidator
from .config import ESTIMATE_BYTES_PER_SECOND
from .errors import IngestError, InvalidInputFileError, NoFilesToProcessError
from .events import ProgressChannel
from .grouping import RecordingGroupClassifier
from .models.options import ProcessingOptions
from .models.recording import RecordingGroup, SourceFile
from .models.result import Disposition, ProcessingSummary
from .scanning.filters import SmallFileFilter


class IngestionPipeline:
    """Runs the processing stages over files already in a private working area."""

    def __init__(self, consolidator: Optional[AudioConsolidator] = None,
                 small_file_filter: Optional[SmallFileFilter] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.consolidator = consolidator or AudioConsolidator(logger=self.logger)
        self.small_file_filter = small_file_filter or SmallFileFilter(logger=self.logger)

    def plan(self, files: Sequence[SourceFile], options: ProcessingOptions) -> Sequence[RecordingGroup]:
        """Groups that ``process`` would consolidate; never touches the files."""
        groups = RecordingGroupClassifier(options.grouping, self.logger).group(files)
        if not options.merge_enabled:
            groups = [single for group in groups for single in group.split()]
        return groups

    def process(self, files: Sequence[SourceFile], destination_dir: Path,
                options: ProcessingOptions,
                channel: Optional[ProgressChannel] = None,
                summary: Optional[ProcessingSummary] = None) -> ProcessingSummary:
        """
        Filter, group and consolidate ``files`` into ``destination_dir``.

        Group failures are recorded in the summary and do not stop the run.
        Anything that is not an IngestError or OSError propagates; a caller
        that passes its own ``summary`` still sees what was done before that.
        """
        if not files:
            raise NoFilesToProcessError()

        channel = channel or ProgressChannel()
        start_time = time.perf_counter()
        summary = summary if summary is not None else ProcessingSummary()
        self.logger.info("Starting audio processing: %d files", len(files))

        kept, removed = self.small_file_filter.filter(
            files, options.small_file_threshold, options.delete_small_files
        )
        for f in removed:
            summary.deleted_small_files.append(f.path)
            summary.dispositions[f.path] = Disposition.DELETED_SMALL

        if not kept:
            self.logger.info("No files remaining after small file filtering")
        else:
            groups = self.plan(kept, options)
            total = len(groups)
            for index, group in enumerate(groups):
                channel.progress(f"Processing {group.description}", index / total)
                self._process_group(group, Path(destination_dir), options, summary)

        channel.progress("Processing complete", 1.0)
        summary.total_processing_time = time.perf_counter() - start_time
        self.logger.info("Audio processing completed: %d processed, %d merged, %d deleted, %d skipped",
                         len(summary.processed_files), len(summary.merged_files),
                         len(summary.deleted_small_files), len(summary.skipped_files))
        return summary

    def _process_group(self, group: RecordingGroup, destination_dir: Path,
                       options: ProcessingOptions, summary: ProcessingSummary) -> None:
        try:
            output = self.consolidator.consolidate(group, destination_dir, options)
        except InvalidInputFileError as e:
            if group.should_merge:
                self.logger.warning("Cannot merge %s (%s); processing files individually",
                                    group.description, e)
                for single in group.split():
                    self._process_group(single, destination_dir, options, summary)
                return
            self._skip(group, e, summary)
            return
        except (IngestError, OSError) as e:
            self._skip(group, e, summary)
            return

        summary.processed_files.append(output)
        if group.should_merge:
            summary.merged_files.append(output)
        summary.inputs_by_output[output] = [f.path for f in group.files]
        for f in group.files:
            summary.dispositions[f.path] = Disposition.CONSOLIDATED

    def _skip(self, group: RecordingGroup, error: BaseException, summary: ProcessingSummary) -> None:
        self.logger.error("Failed to process group %s: %s", group.description, error)
        for f in group.files:
            summary.skipped_files.append(f.path)
            summary.dispositions[f.path] = Disposition.SKIPPED


def estimate_processing_seconds(files: Sequence[SourceFile]) -> float:
    """Roughly one second per 10MB, never less than a second."""
    total = sum(f.size_bytes for f in files)
    return max(total / ESTIMATE_BYTES_PER_SECOND, 1.0)
