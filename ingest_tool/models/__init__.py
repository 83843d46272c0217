"""Data models for the Recorder Ingest Tool."""

from .recording import SourceFile, RecordingGroup, FragmentName, extract_base_name, parse_fragment_name
from .options import OutputFormat, GroupingRules, ProcessingOptions
from .result import TransferState, TransferResult, Disposition, ProcessingSummary

__all__ = [
    'SourceFile', 'RecordingGroup', 'FragmentName', 'extract_base_name', 'parse_fragment_name',
    'OutputFormat', 'GroupingRules', 'ProcessingOptions',
    'TransferState', 'TransferResult', 'Disposition', 'ProcessingSummary',
]
