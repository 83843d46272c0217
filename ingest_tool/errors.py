#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Typed error conditions and their user-facing messages.

Every IngestError carries a stable ``code``; ``user_message`` turns any
exception into the short text shown to the user.
"""

from __future__ import annotations

from typing import Optional

from .utils.size import format_bytes

NO_FILES_TO_PROCESS = "NO_FILES_TO_PROCESS"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
INSUFFICIENT_SPACE = "INSUFFICIENT_SPACE"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
PERMISSION_DENIED = "PERMISSION_DENIED"
COPY_FAILED = "COPY_FAILED"
VERIFICATION_FAILED = "VERIFICATION_FAILED"
INVALID_INPUT_FILE = "INVALID_INPUT_FILE"
EXPORT_FAILED = "EXPORT_FAILED"
NO_INPUT_FILES = "NO_INPUT_FILES"
TRANSFER_BUSY = "TRANSFER_BUSY"

ERROR_MESSAGES = {
    NO_FILES_TO_PROCESS: "No audio files found to process.",
    CONFIGURATION_ERROR: "Please set a valid destination folder.",
    INSUFFICIENT_SPACE: "Insufficient disk space for transfer.",
    FILE_NOT_FOUND: "A file disappeared before it could be read.",
    PERMISSION_DENIED: "Permission denied while accessing files.",
    COPY_FAILED: "A file could not be copied.",
    VERIFICATION_FAILED: "A copied file did not match its source.",
    INVALID_INPUT_FILE: "A recording could not be decoded.",
    EXPORT_FAILED: "Audio export failed.",
    NO_INPUT_FILES: "No input files provided.",
    TRANSFER_BUSY: "Device is busy. Please try again.",
}


class IngestError(Exception):
    """Base class for every condition the ingest core reports."""

    code = "INGEST_ERROR"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or ERROR_MESSAGES.get(self.code, self.code))

    @property
    def user_message(self) -> str:
        return ERROR_MESSAGES.get(self.code, str(self))


class NoFilesToProcessError(IngestError):
    code = NO_FILES_TO_PROCESS


class ConfigurationError(IngestError):
    code = CONFIGURATION_ERROR


class InsufficientSpaceError(IngestError):
    code = INSUFFICIENT_SPACE

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient space: need {format_bytes(required)}, have {format_bytes(available)}"
        )


class MissingFileError(IngestError):
    code = FILE_NOT_FOUND


class PermissionDeniedError(IngestError):
    code = PERMISSION_DENIED


class CopyFailedError(IngestError):
    code = COPY_FAILED


class VerificationFailedError(IngestError):
    code = VERIFICATION_FAILED


class InvalidInputFileError(IngestError):
    code = INVALID_INPUT_FILE


class ExportFailedError(IngestError):
    code = EXPORT_FAILED

    def __init__(self, detail: str = "", attempts: Optional[int] = None):
        self.attempts = attempts
        super().__init__(detail)


class NoInputFilesError(IngestError):
    code = NO_INPUT_FILES


class TransferBusyError(IngestError):
    code = TRANSFER_BUSY


def user_message(exc: BaseException) -> str:
    """Short message suitable for a notification banner."""
    if isinstance(exc, InsufficientSpaceError):
        return str(exc)
    if isinstance(exc, IngestError):
        return exc.user_message
    return str(exc) or type(exc).__name__
