#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Variation graph data structures.

A bidirected sequence graph where every node carries a DNA sequence and
every path is an ordered walk of oriented node traversals (handles). The
binning engine only reads from the graph through the PathGraph protocol;
VariationGraph is the in-memory implementation loaded from GFA.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol, Set, Tuple

import numpy as np

from ..errors import GraphConsistencyError

logger = logging.getLogger(__name__)


# ============================================================================
# Part 1: Handles, nodes and paths
# ============================================================================

@dataclass(frozen=True)
class Handle:
    """A node id paired with a traversal orientation."""
    node_id: int
    is_reverse: bool = False

    def flip(self) -> 'Handle':
        """Return the same node traversed in the opposite orientation."""
        return Handle(self.node_id, not self.is_reverse)

    @property
    def orientation(self) -> str:
        """GFA orientation character ('+' or '-')."""
        return '-' if self.is_reverse else '+'


@dataclass
class Node:
    """
    Node in the variation graph.

    Attributes:
        id: Positive integer node identifier
        sequence: Forward-strand DNA sequence
        length: Declared length in basepairs (defaults to len(sequence))
    """
    id: int
    sequence: str
    length: Optional[int] = None

    def __post_init__(self):
        """Fill in the declared length when it was not given."""
        if self.id <= 0:
            raise GraphConsistencyError(f"Node ids must be positive, got {self.id}")
        if self.length is None:
            self.length = len(self.sequence)


@dataclass(frozen=True)
class PathRecord:
    """Named ordered walk of handles (one haplotype or genome)."""
    name: str
    steps: Tuple[Handle, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)


# ============================================================================
# Part 2: Read contract consumed by the binning engine
# ============================================================================

class PathGraph(Protocol):
    """
    Protocol defining the read-only interface the binning engine needs.

    Both VariationGraph and lightweight test fixtures satisfy it.
    """

    def total_length(self) -> int:
        """Sum of all node lengths."""
        ...

    def nodes(self) -> Iterator[Node]:
        """Nodes in canonical order."""
        ...

    def paths(self) -> Iterator[PathRecord]:
        """Paths in declaration order."""
        ...

    def has_node(self, node_id: int) -> bool:
        ...

    def node_length(self, node_id: int) -> int:
        ...

    def node_sequence(self, node_id: int) -> str:
        ...

    def node_absolute_offset(self, node_id: int) -> int:
        """Start of the node in the concatenated coordinate space."""
        ...


# ============================================================================
# Part 3: In-memory variation graph
# ============================================================================

@dataclass
class VariationGraph:
    """
    In-memory variation graph.

    Node insertion order defines the canonical order, and therefore the
    absolute coordinate space: node i occupies
    [offset_i, offset_i + length_i) where offsets are the cumulative sum of
    the lengths of all nodes before it.
    """
    _nodes: Dict[int, Node] = field(default_factory=dict)
    _edges: Set[Tuple[Handle, Handle]] = field(default_factory=set)
    _paths: List[PathRecord] = field(default_factory=list)
    _path_names: Set[str] = field(default_factory=set)
    _offsets: Optional[Dict[int, int]] = field(default=None, repr=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_node(self, node: Node):
        """Add a node to the graph (appended to the canonical order)."""
        if node.id in self._nodes:
            raise GraphConsistencyError(f"Node {node.id} already present in graph")
        self._nodes[node.id] = node
        self._invalidate()

    def add_edge(self, from_handle: Handle, to_handle: Handle):
        """Add a bidirected edge between two handles."""
        self._edges.add((from_handle, to_handle))

    def add_path(self, path: PathRecord):
        """Add a path; names must be unique."""
        if path.name in self._path_names:
            raise GraphConsistencyError(f"Path {path.name} already present in graph")
        self._path_names.add(path.name)
        self._paths.append(path)

    def _invalidate(self):
        self._offsets = None

    def _build_offsets(self):
        """Compute absolute node offsets from the canonical node order."""
        order = list(self._nodes)
        lengths = np.fromiter(
            (self._nodes[node_id].length for node_id in order),
            dtype=np.int64,
            count=len(order),
        )
        starts = np.zeros(len(order), dtype=np.int64)
        if len(order) > 1:
            np.cumsum(lengths[:-1], out=starts[1:])
        self._offsets = dict(zip(order, starts.tolist()))
        logger.debug(f"Built offset table for {len(order)} nodes")

    # ------------------------------------------------------------------
    # Read interface
    # ------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def path_count(self) -> int:
        return len(self._paths)

    def nodes(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def edges(self) -> Iterator[Tuple[Handle, Handle]]:
        return iter(sorted(self._edges, key=lambda e: (e[0].node_id, e[0].is_reverse,
                                                      e[1].node_id, e[1].is_reverse)))

    def paths(self) -> Iterator[PathRecord]:
        return iter(list(self._paths))

    def has_node(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise GraphConsistencyError(f"Node {node_id} not found in graph") from None

    def node_length(self, node_id: int) -> int:
        return self.get_node(node_id).length

    def node_sequence(self, node_id: int) -> str:
        return self.get_node(node_id).sequence

    def total_length(self) -> int:
        return sum(node.length for node in self._nodes.values())

    def node_absolute_offset(self, node_id: int) -> int:
        if self._offsets is None:
            self._build_offsets()
        try:
            return self._offsets[node_id]
        except KeyError:
            raise GraphConsistencyError(f"Node {node_id} not found in graph") from None

    def validate(self):
        """
        Check internal consistency.

        Raises:
            GraphConsistencyError: On a length/sequence mismatch or a
                dangling node reference in an edge or path.
        """
        for node in self._nodes.values():
            if node.length != len(node.sequence):
                raise GraphConsistencyError(
                    f"Node {node.id}: declared length {node.length} != "
                    f"sequence length {len(node.sequence)}"
                )
        for from_handle, to_handle in self._edges:
            for handle in (from_handle, to_handle):
                if handle.node_id not in self._nodes:
                    raise GraphConsistencyError(
                        f"Edge references missing node {handle.node_id}"
                    )
        for path in self._paths:
            for step in path.steps:
                if step.node_id not in self._nodes:
                    raise GraphConsistencyError(
                        f"Path {path.name} references missing node {step.node_id}"
                    )

    def __repr__(self) -> str:
        return (f"VariationGraph(nodes={self.node_count}, edges={self.edge_count}, "
                f"paths={self.path_count})")


# panbin v0.1.0
# Any usage is subject to this software's license.
