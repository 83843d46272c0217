#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Transfer executor: stages recordings off a removable volume, runs the
ingestion pipeline into the destination and retires the source files.

A source file is only deleted once its data is secured in the destination
(consolidated output, raw fallback copy) or it was deliberately dropped as a
small file. Everything else stays on the volume.
"""

import logging
import shutil
import tempfile
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ..config import STAGING_PREFIX, VERIFY_DELAY_SECONDS
from ..errors import IngestError, TransferBusyError, user_message
from ..events import IngestObserver, ProcessingComplete, ProgressChannel, TransferFailed, TransferStarted, TransferSucceeded
from ..models.options import ProcessingOptions
from ..models.recording import SourceFile
from ..models.result import Disposition, ProcessingSummary, TransferResult, TransferState
from ..pipeline import IngestionPipeline
from ..scanning.discovery import FileDiscovery
from .drive import DriveManager
from .files import copy_verified, move_file, remove_file

SECURED = (Disposition.CONSOLIDATED, Disposition.DELETED_SMALL, Disposition.FALLBACK)


class TransferExecutor:
    """Runs one ingestion job at a time: idle -> transferring -> processing -> idle."""

    def __init__(self, pipeline: Optional[IngestionPipeline] = None,
                 discovery: Optional[FileDiscovery] = None,
                 observer: Optional[IngestObserver] = None,
                 scratch_root: Optional[Path] = None,
                 verify_delay: float = VERIFY_DELAY_SECONDS,
                 sleep: Callable[[float], None] = time.sleep,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.pipeline = pipeline or IngestionPipeline(logger=self.logger)
        self.discovery = discovery
        self.observer = observer
        self.scratch_root = scratch_root
        self.verify_delay = verify_delay
        self.sleep = sleep
        self._state = TransferState.IDLE

    @property
    def state(self) -> TransferState:
        return self._state

    def transfer(self, source_root: Path, destination_dir: Optional[Path],
                 options: Optional[ProcessingOptions] = None) -> TransferResult:
        """
        Move every raw recording under ``source_root`` into ``destination_dir``.

        Raises:
            TransferBusyError: another job is still running on this executor
            ConfigurationError: destination missing or not writable
            InsufficientSpaceError: recordings do not fit on the destination
        """
        if self._state is not TransferState.IDLE:
            raise TransferBusyError(f"state is {self._state.value}")

        options = options or ProcessingOptions()
        channel = ProgressChannel(self.observer)
        self._set_state(channel, TransferState.TRANSFERRING)
        self.logger.info("Starting file transfer from: %s", source_root)
        try:
            return self._run(Path(source_root), destination_dir, options, channel)
        except Exception as e:
            self.logger.error("Transfer failed: %s", e)
            self._set_state(channel, TransferState.ERROR)
            channel.event(TransferFailed(user_message(e)))
            raise
        finally:
            self._set_state(channel, TransferState.IDLE)
            channel.close()

    def _set_state(self, channel: ProgressChannel, state: TransferState) -> None:
        self._state = state
        channel.state(state)

    def _run(self, source_root: Path, destination_dir: Optional[Path],
             options: ProcessingOptions, channel: ProgressChannel) -> TransferResult:
        destination = DriveManager.validate_destination(destination_dir)

        discovery = self.discovery or FileDiscovery(options.grouping.raw_extension, logger=self.logger)
        sources = discovery.discover_files(source_root)
        self.logger.info("Found %d recordings", len(sources))
        if not sources:
            return TransferResult()

        channel.event(TransferStarted(len(sources)))
        DriveManager.check_capacity(sum(f.size_bytes for f in sources), destination)

        scratch = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=self.scratch_root))
        try:
            staged, errored = self._stage(sources, scratch)

            self._set_state(channel, TransferState.PROCESSING)
            summary = ProcessingSummary()
            if staged:
                errored += self._process(staged, destination, options, channel, summary)
            self._retire_sources(staged, summary)
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

        result = TransferResult(
            transferred=len(staged),
            processed=len(summary.processed_files),
            merged=len(summary.merged_files),
            deleted_small=len(summary.deleted_small_files),
            skipped=sum(1 for d in summary.dispositions.values() if d is Disposition.SKIPPED),
            errored=errored,
        )
        self.logger.info("Transfer complete: %s", result)
        channel.event(TransferSucceeded(result.transferred))
        channel.event(ProcessingComplete(result.processed, result.merged, result.deleted_small))
        return result

    def _stage(self, sources: List[SourceFile], scratch: Path) -> Tuple[Dict[Path, SourceFile], int]:
        """Copy and verify every source into the scratch area; per-file failures are counted."""
        staged: Dict[Path, SourceFile] = {}
        errored = 0
        for source in sources:
            try:
                copied = copy_verified(source.path, scratch, delay=self.verify_delay, sleep=self.sleep)
            except IngestError as e:
                self.logger.error("Failed to transfer %s: %s", source.name, e)
                errored += 1
                continue
            staged[copied] = source
            self.logger.debug("Staged %s -> %s", source.path, copied.name)
        self.logger.info("Staged %d of %d recordings", len(staged), len(sources))
        return staged, errored

    def _process(self, staged: Dict[Path, SourceFile], destination: Path,
                 options: ProcessingOptions, channel: ProgressChannel,
                 summary: ProcessingSummary) -> int:
        """Run the pipeline; returns the number of files that could not be placed."""
        # staged copies keep the metadata captured on the source volume
        staged_files = [source.relocated(path) for path, source in staged.items()]
        try:
            self.pipeline.process(staged_files, destination, options, channel, summary)
        except Exception as e:
            self.logger.error("Processing failed (%s); moving raw recordings to destination", e)
            return self._place_leftovers(staged, destination, summary, fallback=True)
        if options.preserve_originals:
            return self._place_leftovers(staged, destination, summary, fallback=False)
        return 0

    def _place_leftovers(self, staged: Dict[Path, SourceFile], destination: Path,
                         summary: ProcessingSummary, fallback: bool) -> int:
        """Move staged files that still exist into the destination under free names."""
        # single-file outputs in the input's own format are already a copy of it
        copied_as_is = {
            inputs[0] for output, inputs in summary.inputs_by_output.items()
            if len(inputs) == 1 and inputs[0].suffix.lower() == output.suffix.lower()
        }
        errored = 0
        for path, source in staged.items():
            if not path.exists() or path in copied_as_is:
                continue
            disposition = summary.dispositions.get(path)
            if not fallback and disposition is not Disposition.CONSOLIDATED:
                continue
            try:
                placed = move_file(path, destination, delay=self.verify_delay, sleep=self.sleep)
            except IngestError as e:
                self.logger.error("Failed to place %s in destination: %s", source.name, e)
                errored += 1
                continue
            if disposition is Disposition.CONSOLIDATED:
                self.logger.info("Kept original %s as %s", source.name, placed.name)
            else:
                summary.processed_files.append(placed)
                summary.dispositions[path] = Disposition.FALLBACK
                self.logger.info("Moved raw recording %s to %s", source.name, placed.name)
        return errored

    def _retire_sources(self, staged: Dict[Path, SourceFile], summary: ProcessingSummary) -> None:
        """Best-effort deletion of originals whose data is secured."""
        for path, source in staged.items():
            if summary.dispositions.get(path) in SECURED:
                if remove_file(source.path, self.logger):
                    self.logger.debug("Removed %s from source volume", source.path)
            else:
                self.logger.warning("Keeping %s on source volume (not processed)", source.path)
