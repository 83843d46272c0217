#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Plan command: read-only preview of what an ingest would do with a volume.
"""

from pathlib import Path
from typing import Any, Dict, List

from ..errors import IngestError, user_message
from ..jsonio import error, success
from ..pipeline import IngestionPipeline, estimate_processing_seconds
from ..scanning.discovery import FileDiscovery
from ..settings import SettingsStore
from ..utils.size import format_bytes


def cmd_plan(store: SettingsStore, source: Path, as_json: bool = False):
    """Discover, mark small files and group without touching anything."""
    options = store.load().options
    source = Path(source).expanduser()
    try:
        files = FileDiscovery(options.grouping.raw_extension).discover_files(source)
    except IngestError as e:
        if as_json:
            return error("plan", user_message(e), debug={"detail": str(e)}, error_code=e.code)
        print(f"Cannot read {source}: {user_message(e)}")
        return 1

    if options.delete_small_files:
        small = [f for f in files if f.size_bytes < options.small_file_threshold]
    else:
        small = []
    small_paths = {f.path for f in small}
    kept = [f for f in files if f.path not in small_paths]

    groups = IngestionPipeline().plan(kept, options)
    extension = options.output_format.extension
    rows: List[Dict[str, Any]] = [
        {
            "output": g.output_file_name(extension),
            "merge": g.should_merge,
            "files": [f.name for f in g.files],
            "total_bytes": g.total_size,
        }
        for g in groups
    ]

    if as_json:
        return success("plan", {
            "source": str(source),
            "groups": rows,
            "small_files": [f.name for f in small],
            "estimated_seconds": round(estimate_processing_seconds(kept), 1) if kept else 0,
        })

    if not files:
        print(f"No recordings found on {source}.")
        return 0

    print(f"{len(files)} recordings on {source}")
    for f in small:
        print(f"  delete (small)  {f.name} ({format_bytes(f.size_bytes)})")
    for row in rows:
        action = "merge" if row["merge"] else "keep"
        print(f"  {action:<14}  {row['output']} <- {', '.join(row['files'])} ({format_bytes(row['total_bytes'])})")
    if kept:
        print(f"Estimated processing time: ~{estimate_processing_seconds(kept):.0f}s")
    return 0
