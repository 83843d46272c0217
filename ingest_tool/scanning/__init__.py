"""Discovery and filtering of recordings on a source volume."""

from .discovery import FileDiscovery, discover_audio_files
from .filters import SmallFileFilter, FilterResult

__all__ = [
    'FileDiscovery',
    'SmallFileFilter',
    'FilterResult',
    'discover_audio_files',
]
