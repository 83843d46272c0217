#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Copy, verify and move primitives. Nothing here ever overwrites an existing file.
"""

import errno
import logging
import os
import shutil
import time
from pathlib import Path
from typing import Callable, Optional

from ..config import PARTIAL_SUFFIX, VERIFY_DELAY_SECONDS
from ..errors import CopyFailedError, MissingFileError, PermissionDeniedError, VerificationFailedError

logger = logging.getLogger(__name__)

NO_HARDLINK_ERRNOS = (errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.EMLINK, errno.ENOSYS)


def unique_destination(folder: Path, file_name: str) -> Path:
    """``name.ext``, else ``name_1.ext``, ``name_2.ext``... whichever is free first."""
    folder = Path(folder)
    candidate = folder / file_name
    stem, suffix = Path(file_name).stem, Path(file_name).suffix
    counter = 1
    while candidate.exists() or partial_path(candidate).exists():
        candidate = folder / f"{stem}_{counter}{suffix}"
        counter += 1
    return candidate


def partial_path(final: Path) -> Path:
    """Hidden sibling used while a file is still being written."""
    return final.with_name(f".{final.name}{PARTIAL_SUFFIX}")


def commit_file(temp: Path, final: Path) -> Path:
    """
    Give ``temp`` the name ``final`` without replacing anything there.

    The destination is shared with other programs, so a name that was free
    when chosen may be taken by now. ``os.link`` fails instead of replacing;
    a taken name moves on to the next free one. Returns the name used.
    """
    temp, final = Path(temp), Path(final)
    wanted = final.name
    while True:
        try:
            os.link(temp, final)
        except FileExistsError:
            logger.debug("%s appeared while writing; picking another name", final.name)
            final = unique_destination(final.parent, wanted)
            continue
        except OSError as e:
            if e.errno not in NO_HARDLINK_ERRNOS:
                raise
            # no hard links on this filesystem
            if final.exists():
                final = unique_destination(final.parent, wanted)
            os.rename(temp, final)
            return final
        os.unlink(temp)
        return final


def verify_copy(source: Path, destination: Path, delay: float = VERIFY_DELAY_SECONDS,
                sleep: Callable[[float], None] = time.sleep) -> None:
    """Destination must exist and match the source byte for byte in size."""
    if delay:
        sleep(delay)
    if not destination.exists():
        raise VerificationFailedError(destination.name)
    try:
        source_size = source.stat().st_size
        dest_size = destination.stat().st_size
    except OSError as e:
        raise VerificationFailedError(f"{destination.name}: {e}") from e
    if source_size != dest_size:
        raise VerificationFailedError(
            f"{destination.name}: size mismatch {source_size} vs {dest_size}"
        )


def copy_verified(source: Path, folder: Path, file_name: Optional[str] = None,
                  delay: float = VERIFY_DELAY_SECONDS,
                  sleep: Callable[[float], None] = time.sleep) -> Path:
    """
    Copy ``source`` into ``folder`` under a free name and verify it.

    The bytes are written to a hidden partial file first and only renamed to
    the final name once the size check passed.
    """
    source = Path(source)
    final = unique_destination(folder, file_name or source.name)
    temp = partial_path(final)
    try:
        shutil.copyfile(source, temp)
        try:
            shutil.copystat(source, temp)
        except OSError:
            pass
        verify_copy(source, temp, delay=delay, sleep=sleep)
        final = commit_file(temp, final)
    except VerificationFailedError:
        _discard(temp)
        raise
    except FileNotFoundError as e:
        _discard(temp)
        if not source.exists():
            raise MissingFileError(str(source)) from e
        raise CopyFailedError(f"{source.name}: {e}") from e
    except PermissionError as e:
        _discard(temp)
        raise PermissionDeniedError(str(e.filename or source)) from e
    except OSError as e:
        _discard(temp)
        raise CopyFailedError(f"{source.name}: {e.strerror or e}") from e

    if not final.exists():
        raise VerificationFailedError(final.name)
    return final


def move_file(source: Path, folder: Path, file_name: Optional[str] = None,
              delay: float = VERIFY_DELAY_SECONDS,
              sleep: Callable[[float], None] = time.sleep) -> Path:
    """Rename into ``folder`` when on the same volume, else copy, verify and delete."""
    source = Path(source)
    final = unique_destination(folder, file_name or source.name)
    try:
        return commit_file(source, final)
    except OSError as e:
        if e.errno != errno.EXDEV:
            if isinstance(e, FileNotFoundError):
                raise MissingFileError(str(source)) from e
            if isinstance(e, PermissionError):
                raise PermissionDeniedError(str(source)) from e
            raise CopyFailedError(f"{source.name}: {e.strerror or e}") from e
    copied = copy_verified(source, folder, final.name, delay=delay, sleep=sleep)
    remove_file(source)
    return copied


def remove_file(path: Path, log: Optional[logging.Logger] = None) -> bool:
    """Best-effort delete; failures are logged, never raised."""
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return True
    except OSError as e:
        (log or logger).warning("Failed to delete %s: %s", path, e)
        return False


def _discard(path: Path) -> None:
    try:
        os.remove(path)
    except OSError:
        pass
