#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Processing options for one ingestion job.
"""

from dataclasses import dataclass, asdict, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..config import (
    DEFAULT_LARGE_FILE_BYTES, DEFAULT_OUTPUT_FORMAT, DEFAULT_PROXIMITY_SECONDS,
    DEFAULT_SMALL_FILE_BYTES, RAW_AUDIO_EXT, VENDOR_TOKENS,
)


class OutputFormat(str, Enum):
    """Supported output containers."""
    WAV = "wav"   # lossless PCM
    M4A = "m4a"   # AAC in an MPEG-4 container

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def export_format(self) -> str:
        """ffmpeg muxer name used by the encoder."""
        return "wav" if self is OutputFormat.WAV else "ipod"

    @property
    def export_kwargs(self) -> Dict[str, Any]:
        if self is OutputFormat.WAV:
            return {}
        return {
            "codec": "aac",
            "bitrate": "128k",
            "parameters": ["-ac", "2", "-ar", "44100"],
        }

    @classmethod
    def parse(cls, value: "str | OutputFormat") -> "OutputFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().lstrip("."))
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unsupported output format {value!r} (choose from {choices})") from None


@dataclass(frozen=True)
class GroupingRules:
    """Heuristic constants used to reassemble split recordings."""
    large_file_bytes: int = DEFAULT_LARGE_FILE_BYTES
    proximity_seconds: float = DEFAULT_PROXIMITY_SECONDS
    vendor_tokens: Tuple[str, ...] = VENDOR_TOKENS
    raw_extension: str = RAW_AUDIO_EXT


@dataclass(frozen=True)
class ProcessingOptions:
    """Configuration snapshot for one job; never mutated mid-job."""
    merge_enabled: bool = True
    delete_small_files: bool = True
    small_file_threshold: int = DEFAULT_SMALL_FILE_BYTES
    output_format: OutputFormat = OutputFormat(DEFAULT_OUTPUT_FORMAT)
    preserve_originals: bool = False
    grouping: GroupingRules = field(default_factory=GroupingRules)

    def with_overrides(self, **changes: Any) -> "ProcessingOptions":
        """Copy with the given non-None fields replaced."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "output_format" in changes:
            changes["output_format"] = OutputFormat.parse(changes["output_format"])
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["output_format"] = self.output_format.value
        data["grouping"]["vendor_tokens"] = list(self.grouping.vendor_tokens)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ProcessingOptions":
        """Build options from persisted settings; unknown keys are ignored."""
        data = dict(data or {})
        grouping_data = dict(data.pop("grouping", None) or {})
        if "vendor_tokens" in grouping_data:
            grouping_data["vendor_tokens"] = tuple(grouping_data["vendor_tokens"])
        grouping_fields = GroupingRules.__dataclass_fields__.keys()
        grouping = GroupingRules(**{k: v for k, v in grouping_data.items() if k in grouping_fields})
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__ and k != "grouping"}
        if "output_format" in known:
            known["output_format"] = OutputFormat.parse(known["output_format"])
        return cls(grouping=grouping, **known)
