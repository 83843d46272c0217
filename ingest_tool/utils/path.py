#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path utility functions for the Recorder Ingest Tool.
"""

from pathlib import Path


def ensure_dir(p: Path) -> None:
    """Ensure directory exists, creating it if necessary."""
    p.mkdir(parents=True, exist_ok=True)


def is_hidden(name: str) -> bool:
    """Dot-files and macOS resource forks are never recordings."""
    return name.startswith(".")
