import sys
from pathlib import Path

import pytest

# Make the ingest_tool package importable without installing it
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from ingest_tool.audio.consolidator import AudioConsolidator
from ingest_tool.pipeline import IngestionPipeline
from ingest_tool.tests.fixtures.volume_setup import FakeCodec


@pytest.fixture
def fake_codec():
    return FakeCodec()


@pytest.fixture
def consolidator(fake_codec):
    return AudioConsolidator(codec=fake_codec, sleep=lambda _: None)


@pytest.fixture
def pipeline(consolidator):
    return IngestionPipeline(consolidator=consolidator)
