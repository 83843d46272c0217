"""Recorder Ingest Tool - transfer, reassemble and convert voice recorder files."""

__version__ = "1.0.0"
__author__ = "Recorder Ingest Team"

# Import key classes for convenient top-level access
from .grouping import RecordingGroupClassifier, group_recordings
from .pipeline import IngestionPipeline
from .storage.transfer import TransferExecutor
from .audio import AudioConsolidator
from .scanning import FileDiscovery, SmallFileFilter
from .models import (
    SourceFile, RecordingGroup, ProcessingOptions, OutputFormat,
    TransferResult, TransferState,
)
from .settings import SettingsStore

__all__ = [
    # Core classes
    'RecordingGroupClassifier',
    'IngestionPipeline',
    'TransferExecutor',
    'AudioConsolidator',

    # Scanning components
    'FileDiscovery',
    'SmallFileFilter',

    # Data models
    'SourceFile',
    'RecordingGroup',
    'ProcessingOptions',
    'OutputFormat',
    'TransferResult',
    'TransferState',

    # Configuration
    'SettingsStore',

    # Functions
    'group_recordings',

    # Package metadata
    '__version__',
    '__author__'
]
