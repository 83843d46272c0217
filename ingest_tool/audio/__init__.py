"""Audio codec collaborator and the consolidation stage."""

from .codec import AudioCodec, AudioTrack, PydubCodec, TimeRange, Timeline, TimelineSegment, build_timeline
from .consolidator import AudioConsolidator

__all__ = [
    'AudioCodec',
    'AudioConsolidator',
    'AudioTrack',
    'PydubCodec',
    'TimeRange',
    'Timeline',
    'TimelineSegment',
    'build_timeline',
]
