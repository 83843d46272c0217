#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Persisted settings: destination folder, recorder names and processing options.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config import DEFAULT_DEVICE_NAMES, DEFAULT_SETTINGS_PATH, DOCUMENTS_FALLBACK, DROPBOX_INBOX
from .errors import ConfigurationError
from .models.options import GroupingRules, OutputFormat, ProcessingOptions
from .utils.path import ensure_dir
from .utils.time import now_iso

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    destination: Optional[Path] = None
    device_names: Tuple[str, ...] = DEFAULT_DEVICE_NAMES
    options: ProcessingOptions = field(default_factory=ProcessingOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": str(self.destination) if self.destination else None,
            "device_names": list(self.device_names),
            "processing": self.options.to_dict(),
        }


def default_destination() -> Path:
    """Dropbox inbox when present, else a folder under Documents."""
    if DROPBOX_INBOX.is_dir():
        return DROPBOX_INBOX
    ensure_dir(DOCUMENTS_FALLBACK)
    return DOCUMENTS_FALLBACK


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{key} expects true/false, got {value!r}")


def _parse_positive(key: str, value: str, kind=int):
    try:
        parsed = kind(value)
    except ValueError:
        raise ConfigurationError(f"{key} expects a number, got {value!r}") from None
    if parsed < 0:
        raise ConfigurationError(f"{key} must not be negative")
    return parsed


class SettingsStore:
    """JSON file backed settings; a missing or corrupt file means defaults."""

    PROCESSING_BOOLS = ("merge_enabled", "delete_small_files", "preserve_originals")
    KEYS = (
        "destination", "device_names", "merge_enabled", "delete_small_files",
        "small_file_threshold", "output_format", "preserve_originals",
        "large_file_bytes", "proximity_seconds",
    )

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_SETTINGS_PATH

    def load(self) -> Settings:
        data = self._read_all()
        destination = data.get("destination")
        names = data.get("device_names") or list(DEFAULT_DEVICE_NAMES)
        try:
            options = ProcessingOptions.from_dict(data.get("processing"))
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid processing settings in %s: %s", self.path, e)
            options = ProcessingOptions()
        return Settings(
            destination=Path(destination).expanduser() if destination else None,
            device_names=tuple(str(n) for n in names),
            options=options,
        )

    def save(self, settings: Settings) -> None:
        payload = settings.to_dict()
        payload["updated_at"] = now_iso()
        ensure_dir(self.path.parent)
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Configuration - saved settings to %s", self.path)

    def resolve_destination(self, settings: Optional[Settings] = None) -> Path:
        settings = settings or self.load()
        return settings.destination or default_destination()

    def set(self, key: str, value: str) -> Settings:
        """Apply one ``key=value`` change given as text and persist it."""
        if key not in self.KEYS:
            raise ConfigurationError(f"Unknown setting {key!r} (known: {', '.join(self.KEYS)})")
        settings = self.load()
        options = settings.options

        if key == "destination":
            settings = replace(settings, destination=Path(value).expanduser() if value else None)
        elif key == "device_names":
            names = tuple(n.strip() for n in value.split(",") if n.strip())
            if not names:
                raise ConfigurationError("device_names needs at least one name")
            settings = replace(settings, device_names=names)
        elif key in self.PROCESSING_BOOLS:
            settings = replace(settings, options=replace(options, **{key: _parse_bool(key, value)}))
        elif key == "small_file_threshold":
            settings = replace(settings, options=replace(options, small_file_threshold=_parse_positive(key, value)))
        elif key == "output_format":
            try:
                fmt = OutputFormat.parse(value)
            except ValueError as e:
                raise ConfigurationError(str(e)) from None
            settings = replace(settings, options=replace(options, output_format=fmt))
        else:
            kind = float if key == "proximity_seconds" else int
            grouping = replace(options.grouping, **{key: _parse_positive(key, value, kind)})
            settings = replace(settings, options=replace(options, grouping=grouping))

        self.save(settings)
        logger.info("Configuration - %s set to %s", key, value)
        return settings

    def reset_processing(self) -> Settings:
        """Restore processing defaults; destination and device names are kept."""
        settings = replace(self.load(), options=ProcessingOptions(grouping=GroupingRules()))
        self.save(settings)
        return settings

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read settings %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}
