#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for the Recorder Ingest Tool.
"""

from pathlib import Path
from typing import Tuple

# Raw recordings as written by the recorder
RAW_AUDIO_EXT = ".wav"

# Recorder vendor tokens that mark a shared base name as a split recording
VENDOR_TOKENS: Tuple[str, ...] = ("dji", "mic", "rec")

# Volume names treated as voice recorders by the device monitor
DEFAULT_DEVICE_NAMES: Tuple[str, ...] = ("DJI",)

# Default thresholds (can be overridden by CLI / settings)
DEFAULT_SMALL_FILE_BYTES = 5 * 1024 * 1024  # 5MB
DEFAULT_LARGE_FILE_BYTES = 256 * 1024 * 1024  # recorder hard split size
DEFAULT_PROXIMITY_SECONDS = 300.0

# Generic sequential naming: allowed gap between consecutive trailing numbers
SEQUENCE_GAP_MIN = 1
SEQUENCE_GAP_MAX = 10

# Consolidation
DEFAULT_OUTPUT_FORMAT = "m4a"
MAX_EXPORT_ATTEMPTS = 2
EXPORT_RETRY_DELAY_SECONDS = 0.5
MERGED_SUFFIX = "_merged"
PARTIAL_SUFFIX = ".partial"

# Transfer
VERIFY_DELAY_SECONDS = 0.1
STAGING_PREFIX = "ingest-staging-"

# Rough throughput used for time estimates (bytes per second)
ESTIMATE_BYTES_PER_SECOND = 10 * 1024 * 1024

# Persisted settings
DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "ingest-tool" / "settings.json"
DROPBOX_INBOX = Path.home() / "Dropbox" / "Inbox"
DOCUMENTS_FALLBACK = Path.home() / "Documents" / "RecorderIngest"
