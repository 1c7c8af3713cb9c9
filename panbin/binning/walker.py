#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Path walker: turns a path's handles into per-bin traversal events.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from typing import Iterator, NamedTuple

from ..errors import GraphConsistencyError
from ..graph import PathGraph, PathRecord
from .grid import BinGrid


class TraversalEvent(NamedTuple):
    """
    One (node visit, bin) overlap along a path.

    node_local_start/node_local_end are inclusive and always in forward
    node coordinates, whatever the traversal orientation.
    """
    bin_id: int
    overlap_len: int
    is_reverse: bool
    absolute_midpoint: float
    node_local_start: int
    node_local_end: int


def walk_path(path: PathRecord, graph: PathGraph, grid: BinGrid) -> Iterator[TraversalEvent]:
    """
    Yield traversal events for every step of a path, in traversal order.

    A node that crosses bin boundaries yields one event per bin. For a
    reverse step the node is read from its end, so its bins come out in
    descending order.

    Raises:
        GraphConsistencyError: If a step names a node absent from the graph
    """
    for step in path.steps:
        if not graph.has_node(step.node_id):
            raise GraphConsistencyError(
                f"Path {path.name} references missing node {step.node_id}"
            )
        length = graph.node_length(step.node_id)
        if length == 0:
            continue
        offset = graph.node_absolute_offset(step.node_id)

        pieces = grid.bins_overlapping(offset, offset + length)
        if step.is_reverse:
            pieces = reversed(pieces)

        for bin_id, start, end in pieces:
            yield TraversalEvent(
                bin_id=bin_id,
                overlap_len=end - start,
                is_reverse=step.is_reverse,
                absolute_midpoint=(start + end - 1) / 2,
                node_local_start=start - offset,
                node_local_end=end - 1 - offset,
            )


# panbin v0.1.0
# Any usage is subject to this software's license.
