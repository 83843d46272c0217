#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Audio codec collaborator.

The consolidator only needs four primitives: probe a file's duration, load its
audio track, lay tracks end to end on a timeline and export a timeline (or a
single file) in a target format. ``PydubCodec`` probes with mutagen and decodes
and encodes with pydub, which shells out to ffmpeg for anything but WAV.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple, Union

from mutagen import File as MutagenFile, MutagenError
from pydub import AudioSegment

from ..errors import InvalidInputFileError, NoInputFilesError
from ..models.options import OutputFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioTrack:
    path: Path
    duration: float
    channels: Optional[int] = None
    sample_rate: Optional[int] = None


@dataclass(frozen=True)
class TimeRange:
    """Seconds within a source track."""
    start: float
    duration: float


@dataclass(frozen=True)
class TimelineSegment:
    track: AudioTrack
    source_range: TimeRange
    position: float


@dataclass(frozen=True)
class Timeline:
    segments: Tuple[TimelineSegment, ...]

    @property
    def duration(self) -> float:
        return sum(s.source_range.duration for s in self.segments)


class AudioCodec(Protocol):
    def load_duration(self, path: Path) -> float: ...

    def load_audio_track(self, path: Path) -> Optional[AudioTrack]: ...

    def concatenate(self, tracks: Sequence[AudioTrack], ranges: Sequence[TimeRange]) -> Timeline: ...

    def export(self, source: Union[Timeline, Path], destination: Path, fmt: OutputFormat) -> None: ...


def build_timeline(tracks: Sequence[AudioTrack], ranges: Sequence[TimeRange]) -> Timeline:
    """Place each range at the running end of the timeline, in order."""
    if not tracks:
        raise NoInputFilesError()
    if len(tracks) != len(ranges):
        raise ValueError("tracks and ranges must have the same length")
    cursor = 0.0
    segments = []
    for track, time_range in zip(tracks, ranges):
        segments.append(TimelineSegment(track=track, source_range=time_range, position=cursor))
        cursor += time_range.duration
    return Timeline(tuple(segments))


class PydubCodec:
    """mutagen for probing, pydub/ffmpeg for decoding and encoding."""

    def load_audio_track(self, path: Path) -> Optional[AudioTrack]:
        try:
            audio = MutagenFile(str(path))
        except (MutagenError, OSError) as e:
            logger.debug("Could not probe %s: %s", path, e)
            return None
        info = getattr(audio, "info", None) if audio is not None else None
        length = getattr(info, "length", 0) or 0
        if length <= 0:
            return None
        return AudioTrack(
            path=Path(path),
            duration=float(length),
            channels=getattr(info, "channels", None),
            sample_rate=getattr(info, "sample_rate", None),
        )

    def load_duration(self, path: Path) -> float:
        track = self.load_audio_track(path)
        if track is None:
            raise InvalidInputFileError(Path(path).name)
        return track.duration

    def concatenate(self, tracks: Sequence[AudioTrack], ranges: Sequence[TimeRange]) -> Timeline:
        return build_timeline(tracks, ranges)

    def export(self, source: Union[Timeline, Path], destination: Path, fmt: OutputFormat) -> None:
        audio = self._render(source)
        handle = audio.export(str(destination), format=fmt.export_format, **fmt.export_kwargs)
        handle.close()

    def _render(self, source: Union[Timeline, Path]) -> AudioSegment:
        if not isinstance(source, Timeline):
            return AudioSegment.from_file(str(source))

        combined = None
        for segment in source.segments:
            audio = AudioSegment.from_file(str(segment.track.path))
            start_ms = int(round(segment.source_range.start * 1000))
            end_ms = start_ms + int(round(segment.source_range.duration * 1000))
            # probe and decoder may disagree by a few ms at the tail
            part = audio[start_ms:end_ms] if end_ms < len(audio) - 1 else audio[start_ms:]
            combined = part if combined is None else combined + part
        if combined is None:
            raise NoInputFilesError()
        return combined
