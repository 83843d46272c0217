#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Destination volume checks for the Recorder Ingest Tool.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError, InsufficientSpaceError

logger = logging.getLogger(__name__)


class DriveManager:
    """Handle destination validation and free-space checks."""

    @staticmethod
    def available_bytes(path: Path) -> Optional[int]:
        """Free bytes on the volume holding ``path``, or None if unknown."""
        try:
            return shutil.disk_usage(str(path)).free
        except OSError as e:
            logger.warning("Could not check available space on %s: %s", path, e)
            return None

    @staticmethod
    def check_capacity(required: int, destination: Path) -> None:
        """Raise InsufficientSpaceError when ``required`` bytes will not fit."""
        available = DriveManager.available_bytes(destination)
        if available is not None and required > available:
            raise InsufficientSpaceError(required=required, available=available)

    @staticmethod
    def validate_destination(destination: Optional[Path], required_bytes: int = 0) -> Path:
        """Destination must exist, be a writable directory and have room."""
        if destination is None or str(destination) == "":
            raise ConfigurationError("No destination folder configured")
        destination = Path(destination).expanduser()
        if not destination.exists():
            raise ConfigurationError(f"Destination folder does not exist: {destination}")
        if not destination.is_dir():
            raise ConfigurationError(f"Destination is not a folder: {destination}")
        if not os.access(destination, os.W_OK | os.X_OK):
            raise ConfigurationError(f"Destination folder is not writable: {destination}")
        if required_bytes:
            DriveManager.check_capacity(required_bytes, destination)
        return destination
