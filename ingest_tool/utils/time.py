#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Time utility functions for the Recorder Ingest Tool.
"""

from datetime import datetime, timezone
from typing import Optional


def now_iso() -> str:
    """Return current UTC time in ISO format for settings and reports."""
    return datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def from_timestamp(ts: Optional[float]) -> Optional[datetime]:
    """Convert a POSIX timestamp into an aware UTC datetime (None passes through)."""
    if ts is None:
        return None
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
