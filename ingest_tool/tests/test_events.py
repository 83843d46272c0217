#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for notification events and error messages.
"""

import logging

import pytest

from ingest_tool.errors import (
    ConfigurationError, ExportFailedError, InsufficientSpaceError, TransferBusyError, user_message,
)
from ingest_tool.events import (
    DeviceDetected, LoggingObserver, ProcessingComplete, TransferFailed, TransferStarted, TransferSucceeded,
)


class TestEventMessages:

    def test_device_detected(self):
        event = DeviceDetected("DJI")
        assert event.title == "Voice Recorder Detected"
        assert event.message == "Checking for files..."

    @pytest.mark.parametrize("count,message", [
        (1, "Found 1 file. Transfer started..."),
        (3, "Found 3 files. Transfer started..."),
    ])
    def test_transfer_started(self, count, message):
        assert TransferStarted(count).message == message

    def test_transfer_succeeded(self):
        assert TransferSucceeded(2).message == "2 files transferred successfully."

    def test_processing_complete(self):
        assert ProcessingComplete(2, 1, 1).message == "2 files processed, 1 file merged, 1 small file deleted."
        assert ProcessingComplete(0, 0, 0).message == "Processing complete."

    def test_transfer_failed_carries_message(self):
        event = TransferFailed("Device is busy. Please try again.")
        assert event.title == "Transfer Failed"
        assert event.message == "Device is busy. Please try again."

    def test_logging_observer(self, caplog):
        with caplog.at_level(logging.INFO):
            LoggingObserver().on_event(TransferSucceeded(1))
        assert "Transfer Complete: 1 file transferred successfully." in caplog.text


class TestErrorMessages:

    def test_codes_are_stable(self):
        assert ConfigurationError().code == "CONFIGURATION_ERROR"
        assert ExportFailedError("x", attempts=2).code == "EXPORT_FAILED"

    def test_user_message_for_ingest_errors(self):
        assert user_message(TransferBusyError()) == "Device is busy. Please try again."
        assert user_message(ConfigurationError("no folder")) == "Please set a valid destination folder."

    def test_insufficient_space_shows_sizes(self):
        message = user_message(InsufficientSpaceError(required=3_000_000, available=1_000_000))
        assert message == "Insufficient space: need 3.0 MB, have 1.0 MB"

    def test_other_exceptions(self):
        assert user_message(RuntimeError("boom")) == "boom"
        assert user_message(RuntimeError()) == "RuntimeError"
