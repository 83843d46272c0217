#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Consolidation of one recording group into a single output file.
"""

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..config import EXPORT_RETRY_DELAY_SECONDS, MAX_EXPORT_ATTEMPTS
from ..errors import ExportFailedError, InvalidInputFileError, MissingFileError, NoInputFilesError
from ..models.options import OutputFormat, ProcessingOptions
from ..models.recording import RecordingGroup, SourceFile
from ..storage.files import commit_file, copy_verified, move_file, partial_path, remove_file, unique_destination
from .codec import AudioCodec, AudioTrack, PydubCodec, TimeRange, Timeline


class AudioConsolidator:
    """Merge/convert a RecordingGroup into the destination folder."""

    def __init__(self, codec: Optional[AudioCodec] = None,
                 max_attempts: int = MAX_EXPORT_ATTEMPTS,
                 retry_delay: float = EXPORT_RETRY_DELAY_SECONDS,
                 sleep: Callable[[float], None] = time.sleep,
                 logger: Optional[logging.Logger] = None):
        self.codec = codec or PydubCodec()
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.sleep = sleep
        self.logger = logger or logging.getLogger(__name__)

    def consolidate(self, group: RecordingGroup, destination_dir: Path,
                    options: ProcessingOptions) -> Path:
        """
        Produce one output file for ``group`` and return its path.

        Raises:
            InvalidInputFileError: a merge member has no decodable audio track
            ExportFailedError: every export attempt failed
        """
        destination_dir = Path(destination_dir)
        fmt = options.output_format
        output = unique_destination(destination_dir, group.output_file_name(fmt.extension))

        if group.should_merge:
            self.logger.info("Merging %d files into %s", len(group), output.name)
            self.validate(group.files)
            output, duration = self.merge(group.files, output, fmt)
            self.logger.info("Successfully merged %d files (duration: %.1fs)", len(group), duration)
            if not options.preserve_originals:
                self._remove_inputs(group.files)
            return output

        source = group.files[0]
        if source.suffix.lower() == fmt.extension:
            if options.preserve_originals:
                output = copy_verified(source.path, destination_dir, output.name)
            else:
                output = move_file(source.path, destination_dir, output.name)
            self.logger.info("Moved %s to destination (no conversion needed)", source.name)
            return output

        track = self.codec.load_audio_track(source.path)
        if track is None:
            raise InvalidInputFileError(source.name)
        output = self.export_with_retry(source.path, output, fmt)
        self.logger.info("Converted %s to %s (duration: %.1fs)", source.name, fmt.value, track.duration)
        if not options.preserve_originals:
            self._remove_inputs(group.files)
        return output

    def validate(self, files: Sequence[SourceFile]) -> None:
        """Every member must expose an audio track before a merge is attempted."""
        if not files:
            raise NoInputFilesError()
        for f in files:
            if not f.path.exists():
                raise MissingFileError(f.name)
            if self.codec.load_audio_track(f.path) is None:
                raise InvalidInputFileError(f.name)

    def merge(self, files: Sequence[SourceFile], output: Path, fmt: OutputFormat) -> Tuple[Path, float]:
        """Concatenate members in order and export; returns the written path and total duration."""
        if not files:
            raise NoInputFilesError()

        tracks: List[AudioTrack] = []
        for f in files:
            track = self.codec.load_audio_track(f.path)
            if track is None:
                self.logger.warning("No audio track found in %s", f.name)
                continue
            tracks.append(track)
            self.logger.debug("Added %s (duration: %.1fs)", f.name, track.duration)
        if not tracks:
            raise InvalidInputFileError(f"no decodable audio in {len(files)} files")

        timeline = self.codec.concatenate(tracks, [TimeRange(0.0, t.duration) for t in tracks])
        return self.export_with_retry(timeline, output, fmt), timeline.duration

    def export_with_retry(self, source: Union[Timeline, Path], output: Path, fmt: OutputFormat) -> Path:
        """Export to a hidden partial file and give it a free final name once complete."""
        temp = partial_path(output)
        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                self.codec.export(source, temp, fmt)
                if not temp.exists():
                    raise ExportFailedError("encoder produced no output")
                return commit_file(temp, output)
            except Exception as e:
                last_error = e
                remove_file(temp, self.logger)
                self.logger.warning("Export attempt %d/%d for %s failed: %s",
                                    attempt, self.max_attempts, output.name, e)
                if attempt < self.max_attempts:
                    self.sleep(self.retry_delay)

        raise ExportFailedError(str(last_error) or type(last_error).__name__,
                                attempts=self.max_attempts) from last_error

    def _remove_inputs(self, files: Sequence[SourceFile]) -> None:
        for f in files:
            remove_file(f.path, self.logger)
