#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Ingest command: one transfer job from a mounted recorder volume.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from ..errors import IngestError, user_message
from ..events import DeviceDetected, LoggingObserver
from ..jsonio import error, success
from ..models.result import TransferState
from ..pipeline import IngestionPipeline
from ..settings import SettingsStore
from ..storage.transfer import TransferExecutor


class ProgressBarObserver(LoggingObserver):
    """Shows job progress as a tqdm bar and prints notifications above it."""

    def __init__(self, show: bool = True, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.show = show
        self.events: List[Any] = []
        self.states: List[TransferState] = []
        self._bar: Optional[tqdm] = None

    def on_progress(self, label: str, fraction: float) -> None:
        if not self.show:
            return
        if self._bar is None:
            self._bar = tqdm(total=100, unit="%", desc="Processing", leave=False)
        target = int(round(fraction * 100))
        self._bar.set_postfix_str(label, refresh=False)
        self._bar.update(max(0, target - self._bar.n))

    def on_state_change(self, state: TransferState) -> None:
        self.states.append(state)
        super().on_state_change(state)

    def on_event(self, event) -> None:
        self.events.append(event)
        if self.show:
            tqdm.write(f"{event.title}: {event.message}")
        else:
            super().on_event(event)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def is_recorder_volume(volume: Path, device_names) -> bool:
    """Volume names are matched case-insensitively against the configured recorder names."""
    name = Path(volume).name.lower()
    return any(name == d.lower() for d in device_names)


def cmd_ingest(
    store: SettingsStore,
    source: Path,
    dest: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    as_json: bool = False,
    pipeline: Optional[IngestionPipeline] = None,
) -> int:
    """Transfer and consolidate every recording on ``source``.

    Returns the process exit code: 0 on success, 1 when the job failed.
    """
    logger = logging.getLogger(__name__)
    settings = store.load()
    options = settings.options.with_overrides(**(overrides or {}))
    source = Path(source).expanduser()
    destination = Path(dest).expanduser() if dest else store.resolve_destination(settings)

    observer = ProgressBarObserver(show=not as_json)
    if is_recorder_volume(source, settings.device_names):
        observer.on_event(DeviceDetected(source.name))
    else:
        logger.info("Volume %s is not a configured recorder; ingesting anyway", source.name)

    executor = TransferExecutor(pipeline=pipeline, observer=observer)
    try:
        result = executor.transfer(source, destination, options)
    except IngestError as e:
        if as_json:
            return error("ingest", user_message(e), debug={"detail": str(e)}, error_code=e.code)
        print(f"Transfer failed: {user_message(e)}")
        return 1
    finally:
        observer.close()

    events = [{"event": type(e).__name__, "title": e.title, "message": e.message} for e in observer.events]
    if as_json:
        return success("ingest", {
            "source": str(source),
            "destination": str(destination),
            "output_format": options.output_format.value,
            "result": result.to_dict(),
        }, meta={"events": events})

    if not result.transferred and not result.errored:
        print(f"No recordings found on {source}.")
        return 0

    print(f"Destination: {destination}")
    print(f"  Transferred:    {result.transferred}")
    print(f"  Processed:      {result.processed}")
    print(f"  Merged:         {result.merged}")
    print(f"  Deleted small:  {result.deleted_small}")
    if result.skipped:
        print(f"  Skipped:        {result.skipped} (left on {source})")
    if result.errored:
        print(f"  Errors:         {result.errored}")
    return 0
