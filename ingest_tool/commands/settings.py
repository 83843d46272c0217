#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings command implementations.
"""

from ..errors import ConfigurationError
from ..jsonio import error, success
from ..settings import Settings, SettingsStore
from ..utils.size import format_bytes


def _print_settings(store: SettingsStore, settings: Settings) -> None:
    options = settings.options
    destination = settings.destination or f"{store.resolve_destination(settings)} (default)"
    print(f"Settings file:        {store.path}")
    print(f"destination:          {destination}")
    print(f"device_names:         {', '.join(settings.device_names)}")
    print(f"merge_enabled:        {options.merge_enabled}")
    print(f"delete_small_files:   {options.delete_small_files}")
    print(f"small_file_threshold: {options.small_file_threshold} ({format_bytes(options.small_file_threshold)})")
    print(f"output_format:        {options.output_format.value}")
    print(f"preserve_originals:   {options.preserve_originals}")
    print(f"large_file_bytes:     {options.grouping.large_file_bytes}")
    print(f"proximity_seconds:    {options.grouping.proximity_seconds:g}")


def cmd_settings_show(store: SettingsStore, as_json: bool = False):
    settings = store.load()
    if as_json:
        return success("settings", settings.to_dict(), meta={"path": str(store.path)})
    _print_settings(store, settings)
    return 0


def cmd_settings_set(store: SettingsStore, key: str, value: str, as_json: bool = False):
    """Change one setting; unknown keys and bad values are reported, not raised."""
    try:
        settings = store.set(key, value)
    except ConfigurationError as e:
        if as_json:
            return error("settings", str(e), error_code=e.code)
        print(f"Invalid setting: {e}")
        return 1
    if as_json:
        return success("settings", settings.to_dict(), meta={"updated": key})
    print(f"Updated {key}.")
    return 0


def cmd_settings_reset(store: SettingsStore, as_json: bool = False):
    settings = store.reset_processing()
    if as_json:
        return success("settings", settings.to_dict(), meta={"reset": True})
    print("Processing settings restored to defaults.")
    return 0
