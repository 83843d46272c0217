#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Job events, observer protocol and the per-job delivery channel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .models.result import TransferState


def _files(count: int) -> str:
    return "1 file" if count == 1 else f"{count} files"


@dataclass(frozen=True)
class DeviceDetected:
    volume: str = ""

    title = "Voice Recorder Detected"

    @property
    def message(self) -> str:
        return "Checking for files..."


@dataclass(frozen=True)
class TransferStarted:
    count: int

    title = "Transfer Started"

    @property
    def message(self) -> str:
        return f"Found {_files(self.count)}. Transfer started..."


@dataclass(frozen=True)
class TransferSucceeded:
    count: int

    title = "Transfer Complete"

    @property
    def message(self) -> str:
        return f"{_files(self.count)} transferred successfully."


@dataclass(frozen=True)
class ProcessingComplete:
    processed: int
    merged: int
    deleted_small: int

    title = "Processing Complete"

    @property
    def message(self) -> str:
        parts = []
        if self.processed:
            parts.append(f"{_files(self.processed)} processed")
        if self.merged:
            parts.append(f"{_files(self.merged)} merged")
        if self.deleted_small:
            parts.append(f"{self.deleted_small} small {'file' if self.deleted_small == 1 else 'files'} deleted")
        return ", ".join(parts) + "." if parts else "Processing complete."


@dataclass(frozen=True)
class TransferFailed:
    message: str

    title = "Transfer Failed"


class IngestObserver(Protocol):
    def on_progress(self, label: str, fraction: float) -> None: ...

    def on_state_change(self, state: TransferState) -> None: ...

    def on_event(self, event) -> None: ...


class NullObserver:
    def on_progress(self, label: str, fraction: float) -> None:
        pass

    def on_state_change(self, state: TransferState) -> None:
        pass

    def on_event(self, event) -> None:
        pass


class LoggingObserver(NullObserver):
    """Writes events and state changes to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def on_state_change(self, state: TransferState) -> None:
        self.logger.debug("Transfer state: %s", state.value)

    def on_event(self, event) -> None:
        self.logger.info("%s: %s", event.title, event.message)


class ProgressChannel:
    """
    Delivers one job's notifications to an observer.

    Progress fractions are clamped to [0, 1] and never go backwards; nothing
    is delivered once the channel is closed.
    """

    def __init__(self, observer: Optional[IngestObserver] = None):
        self.observer = observer or NullObserver()
        self._fraction = 0.0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def progress(self, label: str, fraction: float) -> None:
        if self._closed:
            return
        fraction = min(1.0, max(self._fraction, float(fraction)))
        self._fraction = fraction
        self.observer.on_progress(label, fraction)

    def state(self, state: TransferState) -> None:
        if not self._closed:
            self.observer.on_state_change(state)

    def event(self, event) -> None:
        if not self._closed:
            self.observer.on_event(event)

    def close(self) -> None:
        self._closed = True
