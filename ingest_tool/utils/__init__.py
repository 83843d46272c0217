"""Utility functions for the Recorder Ingest Tool."""

from .time import now_iso, from_timestamp
from .path import ensure_dir, is_hidden
from .size import format_bytes

__all__ = ['now_iso', 'from_timestamp', 'ensure_dir', 'is_hidden', 'format_bytes']
