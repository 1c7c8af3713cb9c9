"""
panbin v0.1.0

I/O module for panbin.

1. gfa_io.py - GFA v1 graph import/export and identifier assignment
"""

from .gfa_io import (
    assign_ids,
    read_gfa,
    load_graph_from_gfa,
    write_gfa,
    export_graph_to_gfa,
    gfa_stats,
)

__all__ = [
    "assign_ids",
    "read_gfa",
    "load_graph_from_gfa",
    "write_gfa",
    "export_graph_to_gfa",
    "gfa_stats",
]
