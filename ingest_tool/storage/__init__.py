"""Destination volume checks and file primitives (the transfer executor lives in .transfer)."""

from .drive import DriveManager
from .files import unique_destination, copy_verified, verify_copy, move_file, remove_file

__all__ = [
    'DriveManager',
    'unique_destination',
    'copy_verified',
    'verify_copy',
    'move_file',
    'remove_file',
]
