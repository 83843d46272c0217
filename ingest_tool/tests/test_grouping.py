#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for recording group classification.
"""

import pytest

from ingest_tool.grouping import RecordingGroupClassifier, group_recordings, has_sequential_naming
from ingest_tool.models.options import GroupingRules
from ingest_tool.models.recording import RecordingGroup, extract_base_name, parse_fragment_name
from ingest_tool.tests.fixtures.volume_setup import MB, group_names, source


class TestNameParsing:
    """Fragment names and base names."""

    def test_fragment_name_parsed(self):
        parsed = parse_fragment_name("DJI_07_20250101_100000.WAV")
        assert parsed.prefix == "DJI"
        assert parsed.sequence == 7
        assert parsed.timestamp_key == "20250101_100000"
        assert parsed.base_name == "DJI_20250101_100000"

    @pytest.mark.parametrize("name", ["DJI_001.WAV", "Meeting 2.wav", "DJI_01_2025_1000.WAV", "notes.wav"])
    def test_non_fragment_names(self, name):
        assert parse_fragment_name(name) is None

    @pytest.mark.parametrize("name,base", [
        ("DJI_001.WAV", "DJI"),
        ("Meeting 2.wav", "Meeting"),
        ("Memo(3).wav", "Memo"),
        ("Memo (3).wav", "Memo"),
        ("notes.wav", "notes"),
    ])
    def test_extract_base_name(self, name, base):
        assert extract_base_name(name) == base


class TestRecordingGroup:
    """RecordingGroup invariants and naming."""

    def test_members_sorted_by_name(self):
        group = RecordingGroup([source("REC_2.wav", 1), source("REC_1.wav", 1)])
        assert [f.name for f in group] == ["REC_1.wav", "REC_2.wav"]
        assert group.base_name == "REC"
        assert group.total_size == 2

    def test_empty_group_rejected(self):
        with pytest.raises(ValueError):
            RecordingGroup([])

    def test_output_name_singleton_keeps_stem(self):
        group = RecordingGroup([source("Interview_3.wav", 1)])
        assert group.output_file_name(".m4a") == "Interview_3.m4a"
        assert not group.should_merge

    def test_output_name_merged(self):
        group = RecordingGroup([source("REC_1.wav", 1), source("REC_2.wav", 1)])
        assert group.output_file_name("m4a") == "REC_merged.m4a"
        assert group.should_merge

    def test_description(self):
        single = RecordingGroup([source("a.wav", 10)])
        merged = RecordingGroup([source("REC_1.wav", 2_000_000), source("REC_2.wav", 500_000)])
        assert single.description == "a.wav"
        assert merged.description == "REC (2 files, 2.5 MB)"

    def test_split(self):
        group = RecordingGroup([source("REC_1.wav", 1), source("REC_2.wav", 1)])
        assert group_names(group.split()) == [("REC_1.wav",), ("REC_2.wav",)]


class TestDeviceFragments:
    """Chaining of <PREFIX>_<seq>_<date>_<time> fragments."""

    def test_large_predecessor_groups_consecutive_fragment(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("DJI_02_20250101_100512.WAV", 50 * 1000 * 1000),
        ]
        groups = group_recordings(files)
        assert group_names(groups) == [("DJI_01_20250101_100000.WAV", "DJI_02_20250101_100512.WAV")]
        assert groups[0].should_merge

    def test_sequence_gap_does_not_group(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("DJI_05_20250101_100512.WAV", 50 * 1000 * 1000),
        ]
        groups = group_recordings(files)
        assert group_names(groups) == [("DJI_01_20250101_100000.WAV",), ("DJI_05_20250101_100512.WAV",)]

    def test_small_fragments_within_proximity_window(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 10 * MB, minutes=0),
            source("DJI_02_20250101_100300.WAV", 10 * MB, minutes=3),
        ]
        assert len(group_recordings(files)) == 1

    def test_small_fragments_outside_proximity_window(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 10 * MB, minutes=0),
            source("DJI_02_20250101_101000.WAV", 10 * MB, minutes=10),
        ]
        assert len(group_recordings(files)) == 2

    def test_missing_creation_time_uses_size_only(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 10 * MB),
            source("DJI_02_20250101_100300.WAV", 10 * MB, minutes=3),
        ]
        assert len(group_recordings(files)) == 2

    def test_threshold_is_configurable(self):
        rules = GroupingRules(large_file_bytes=1000)
        files = [
            source("DJI_01_20250101_100000.WAV", 1000),
            source("DJI_02_20250101_100512.WAV", 10),
        ]
        assert len(RecordingGroupClassifier(rules).group(files)) == 1

    def test_three_part_recording(self):
        files = [
            source("DJI_03_20250101_101024.WAV", 5 * MB),
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("DJI_02_20250101_100512.WAV", 300 * 1000 * 1000),
        ]
        groups = group_recordings(files)
        assert len(groups) == 1
        assert [f.name for f in groups[0]] == [
            "DJI_01_20250101_100000.WAV", "DJI_02_20250101_100512.WAV", "DJI_03_20250101_101024.WAV",
        ]

    def test_latest_chain_wins_and_no_file_is_dropped(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("DJI_01_20250102_090000.WAV", 300 * 1000 * 1000),
            source("DJI_02_20250102_090512.WAV", 10 * MB),
        ]
        groups = group_recordings(files)
        assert group_names(groups) == [
            ("DJI_01_20250101_100000.WAV",),
            ("DJI_01_20250102_090000.WAV", "DJI_02_20250102_090512.WAV"),
        ]

    def test_same_day_recordings_get_distinct_names(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 10 * MB, minutes=0),
            source("DJI_02_20250101_100500.WAV", 10 * MB, minutes=5),
            source("DJI_01_20250101_140000.WAV", 10 * MB, minutes=240),
            source("DJI_02_20250101_140500.WAV", 10 * MB, minutes=245),
        ]
        groups = group_recordings(files)
        assert group_names(groups) == [
            ("DJI_01_20250101_100000.WAV", "DJI_02_20250101_100500.WAV"),
            ("DJI_01_20250101_140000.WAV", "DJI_02_20250101_140500.WAV"),
        ]
        assert [g.base_name for g in groups] == ["DJI_20250101_100000", "DJI_20250101_140000"]
        assert [g.output_file_name(".m4a") for g in groups] == [
            "DJI_20250101_100000_merged.m4a", "DJI_20250101_140000_merged.m4a",
        ]

    def test_large_singleton_without_claimed_continuation_is_kept(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("DJI_01_20250101_120000.WAV", 10 * MB, minutes=120),
            source("DJI_02_20250101_120100.WAV", 10 * MB, minutes=121),
        ]
        groups = group_recordings(files)
        assert group_names(groups) == [
            ("DJI_01_20250101_100000.WAV",),
            ("DJI_01_20250101_120000.WAV", "DJI_02_20250101_120100.WAV"),
        ]


class TestGenericGrouping:
    """Base-name grouping for everything that is not a device fragment."""

    def test_vendor_token_merges(self):
        groups = group_recordings([source("REC_1.wav", MB), source("REC_2.wav", MB)])
        assert group_names(groups) == [("REC_1.wav", "REC_2.wav")]

    def test_parenthesised_vendor_name_merges(self):
        groups = group_recordings([source("Mic(1).wav", MB), source("Mic(2).wav", MB)])
        assert len(groups) == 1

    def test_sequential_names_merge(self):
        groups = group_recordings([source("Interview_1.wav", MB), source("Interview_2.wav", MB)])
        assert len(groups) == 1
        assert groups[0].base_name == "Interview"

    def test_large_gap_stays_separate(self):
        groups = group_recordings([source("Notes_1.wav", MB), source("Notes_30.wav", MB)])
        assert group_names(groups) == [("Notes_1.wav",), ("Notes_30.wav",)]

    def test_non_raw_files_ignored(self):
        groups = group_recordings([source("Interview_1.wav", MB), source("memo.m4a", MB)])
        assert group_names(groups) == [("Interview_1.wav",)]

    def test_duplicate_paths_counted_once(self):
        f = source("solo.wav", MB)
        assert group_names(group_recordings([f, f])) == [("solo.wav",)]

    def test_groups_sorted_by_base_name(self):
        files = [source("zeta.wav", MB), source("alpha.wav", MB), source("REC_2.wav", MB), source("REC_1.wav", MB)]
        groups = group_recordings(files)
        assert [g.base_name for g in groups] == ["REC", "alpha", "zeta"]

    @pytest.mark.parametrize("names,expected", [
        (["a_1.wav", "a_2.wav", "a_4.wav"], True),
        (["a_1.wav", "a_12.wav"], False),
        (["a_1.wav", "a_1 copy.wav"], False),
        (["a_3.wav"], False),
    ])
    def test_has_sequential_naming(self, names, expected):
        assert has_sequential_naming([source(n, 1) for n in names]) is expected


class TestIdempotence:
    """Re-grouping the flattened result reproduces the same partition."""

    def test_regrouping_is_stable(self):
        files = [
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("DJI_02_20250101_100512.WAV", 50 * 1000 * 1000),
            source("DJI_05_20250101_120000.WAV", 20 * MB),
            source("REC_1.wav", MB),
            source("REC_2.wav", MB),
            source("Notes_1.wav", MB),
            source("Notes_30.wav", MB),
        ]
        first = group_recordings(files)
        flattened = [f for g in first for f in g.files]
        second = group_recordings(flattened)
        assert {frozenset(f.name for f in g) for g in first} == {frozenset(f.name for f in g) for g in second}
        assert sorted(f.name for f in flattened) == sorted(f.name for f in files)

    def test_input_order_does_not_matter(self):
        files = [
            source("DJI_02_20250101_100512.WAV", 50 * 1000 * 1000),
            source("Interview_2.wav", MB),
            source("DJI_01_20250101_100000.WAV", 300 * 1000 * 1000),
            source("Interview_1.wav", MB),
        ]
        assert group_names(group_recordings(files)) == group_names(group_recordings(list(reversed(files))))
