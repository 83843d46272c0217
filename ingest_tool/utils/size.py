#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Human readable byte counts.
"""

_UNITS = ("bytes", "KB", "MB", "GB", "TB")


def format_bytes(num: int) -> str:
    """Format a byte count the way file managers do (decimal units)."""
    if num is None:
        return "unknown"
    if abs(num) < 1000:
        return f"{num} bytes" if num != 1 else "1 byte"
    value = float(num)
    for unit in _UNITS[1:]:
        value /= 1000.0
        if abs(value) < 1000 or unit == _UNITS[-1]:
            return f"{value:.1f} {unit}"
    return f"{num} bytes"
