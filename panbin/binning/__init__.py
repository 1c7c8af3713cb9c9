"""
panbin v0.1.0

Path-binning engine.

This module provides:
- BinGrid: partition of the graph's coordinate space into bins
- walk_path: per-bin traversal events for a path
- BinAccumulator / LinkCollector: per-path statistics and bin links
- Output sinks (TSV, NDJSON, recording, prefix aggregation)
- BinningEngine: drives all of the above into a sink
"""

from .grid import BinGrid
from .walker import TraversalEvent, walk_path
from .accumulator import BinAccumulator, PathBinRecord, merge_records
from .links import Link, LinkCollector
from .sinks import (
    JSON_FORMAT_VERSION,
    OUTPUT_FORMATS,
    AggregatingSink,
    JsonSink,
    OutputSink,
    PathRow,
    RecordingSink,
    TsvSink,
    make_sink,
)
from .engine import (
    BinningEngine,
    BinningOptions,
    BinningSummary,
    BinSequenceCache,
    split_path_name,
)

__all__ = [
    # Grid and walking
    "BinGrid",
    "TraversalEvent",
    "walk_path",
    # Per-path collectors
    "BinAccumulator",
    "PathBinRecord",
    "merge_records",
    "Link",
    "LinkCollector",
    # Sinks
    "JSON_FORMAT_VERSION",
    "OUTPUT_FORMATS",
    "AggregatingSink",
    "JsonSink",
    "OutputSink",
    "PathRow",
    "RecordingSink",
    "TsvSink",
    "make_sink",
    # Engine
    "BinningEngine",
    "BinningOptions",
    "BinningSummary",
    "BinSequenceCache",
    "split_path_name",
]
