#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

GFA v1 import/export for variation graphs, plus the dense node id
assignment used while importing.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, TextIO, Union

from ..errors import DuplicateIdentifierError, GFAFormatError, GraphConsistencyError
from ..graph import Handle, Node, PathRecord, VariationGraph

logger = logging.getLogger(__name__)

GFA_VERSION = "1.0"


# ============================================================================
#                           IDENTIFIER ASSIGNMENT
# ============================================================================

def assign_ids(identifiers: Iterable[str]) -> Dict[str, int]:
    """
    Assign dense integer ids to textual identifiers.

    Ids start at 1 and follow first-seen order.

    Args:
        identifiers: Ordered identifier strings (e.g. GFA segment names)

    Returns:
        Mapping identifier -> id

    Raises:
        DuplicateIdentifierError: If an identifier occurs more than once

    Example:
        >>> assign_ids(["s1", "s2", "s7"])
        {'s1': 1, 's2': 2, 's7': 3}
    """
    ids: Dict[str, int] = {}
    for identifier in identifiers:
        if identifier in ids:
            raise DuplicateIdentifierError(identifier)
        ids[identifier] = len(ids) + 1
    return ids


# ============================================================================
#                           GFA RECORDS
# ============================================================================

@dataclass
class GFASegment:
    """Represents a GFA S-line (segment)."""
    name: str
    sequence: str
    length: int
    line_no: int = 0

    def to_gfa_line(self) -> str:
        """
        Convert to GFA S-line format.

        Format: S <name> <sequence> LN:i:<length>
        """
        seq_str = self.sequence if self.sequence else '*'
        return f"S\t{self.name}\t{seq_str}\tLN:i:{self.length}"


@dataclass
class GFALink:
    """Represents a GFA L-line (link/edge)."""
    from_name: str
    from_orient: str
    to_name: str
    to_orient: str
    overlap: str = '0M'
    line_no: int = 0

    def to_gfa_line(self) -> str:
        return f"L\t{self.from_name}\t{self.from_orient}\t{self.to_name}\t{self.to_orient}\t{self.overlap}"


@dataclass
class GFAPath:
    """Represents a GFA P-line (path)."""
    name: str
    steps: List[tuple]  # (segment name, '+' or '-')
    line_no: int = 0

    def to_gfa_line(self) -> str:
        walk = ','.join(f"{name}{orient}" for name, orient in self.steps)
        overlaps = ','.join('0M' for _ in range(max(len(self.steps) - 1, 0))) or '*'
        return f"P\t{self.name}\t{walk}\t{overlaps}"


def _parse_orientation(value: str, line_no: int) -> bool:
    """Return True for reverse ('-'), False for forward ('+')."""
    if value == '+':
        return False
    if value == '-':
        return True
    raise GFAFormatError(f"invalid orientation '{value}'", line_no)


def _parse_segment(parts: List[str], line_no: int) -> GFASegment:
    # S <name> <sequence> [LN:i:<length>] ...
    if len(parts) < 3:
        raise GFAFormatError("malformed S-line", line_no)
    name = parts[1]
    sequence = parts[2] if parts[2] != '*' else ''
    length = None
    for tag in parts[3:]:
        if tag.startswith('LN:i:'):
            try:
                length = int(tag.split(':')[2])
            except ValueError:
                raise GFAFormatError(f"invalid LN tag '{tag}'", line_no) from None
            break
    if not sequence:
        if length is None:
            raise GFAFormatError(f"segment {name} has no sequence and no LN tag", line_no)
        # Placeholder bases keep the coordinate space intact
        sequence = 'N' * length
    if length is None:
        length = len(sequence)
    return GFASegment(name=name, sequence=sequence.upper(), length=length, line_no=line_no)


def _parse_link(parts: List[str], line_no: int) -> GFALink:
    # L <from> <from_orient> <to> <to_orient> <overlap>
    if len(parts) < 5:
        raise GFAFormatError("malformed L-line", line_no)
    overlap = parts[5] if len(parts) > 5 else '0M'
    return GFALink(parts[1], parts[2], parts[3], parts[4], overlap, line_no)


def _parse_path(parts: List[str], line_no: int) -> GFAPath:
    # P <name> <seg1+,seg2-,...> [overlaps]
    if len(parts) < 3:
        raise GFAFormatError("malformed P-line", line_no)
    steps = []
    for step in parts[2].split(','):
        step = step.strip()
        if len(step) < 2:
            raise GFAFormatError(f"invalid path step '{step}'", line_no)
        _parse_orientation(step[-1], line_no)
        steps.append((step[:-1], step[-1]))
    return GFAPath(name=parts[1], steps=steps, line_no=line_no)


# ============================================================================
#                           GFA READER (Graph Import)
# ============================================================================

def read_gfa(stream: TextIO) -> VariationGraph:
    """
    Build a VariationGraph from a GFA v1 text stream.

    Segments are numbered densely in file order, which also fixes the
    canonical node order used for absolute coordinates.

    Raises:
        GFAFormatError: On malformed lines
        DuplicateIdentifierError: On a repeated segment name
        GraphConsistencyError: When links or paths name unknown segments
    """
    segments: List[GFASegment] = []
    links: List[GFALink] = []
    paths: List[GFAPath] = []

    for line_no, raw_line in enumerate(stream, 1):
        line = raw_line.rstrip('\r\n')
        if not line or line.startswith('#'):
            continue

        parts = line.split('\t')
        record_type = parts[0]

        if record_type == 'H':
            continue
        elif record_type == 'S':
            segments.append(_parse_segment(parts, line_no))
        elif record_type == 'L':
            links.append(_parse_link(parts, line_no))
        elif record_type == 'P':
            paths.append(_parse_path(parts, line_no))
        else:
            logger.debug(f"GFA line {line_no}: skipping record type {record_type}")

    ids = assign_ids(seg.name for seg in segments)

    def resolve(name: str, line_no: int, what: str) -> int:
        try:
            return ids[name]
        except KeyError:
            raise GraphConsistencyError(
                f"GFA line {line_no}: {what} references unknown segment {name}"
            ) from None

    graph = VariationGraph()
    for seg in segments:
        graph.add_node(Node(id=ids[seg.name], sequence=seg.sequence, length=seg.length))

    for link in links:
        graph.add_edge(
            Handle(resolve(link.from_name, link.line_no, 'link'),
                   _parse_orientation(link.from_orient, link.line_no)),
            Handle(resolve(link.to_name, link.line_no, 'link'),
                   _parse_orientation(link.to_orient, link.line_no)),
        )

    for gfa_path in paths:
        steps = tuple(
            Handle(resolve(name, gfa_path.line_no, f"path {gfa_path.name}"), orient == '-')
            for name, orient in gfa_path.steps
        )
        graph.add_path(PathRecord(name=gfa_path.name, steps=steps))

    return graph


def load_graph_from_gfa(gfa_path: Union[str, Path]) -> VariationGraph:
    """
    Load a variation graph from a GFA v1 file.

    Args:
        gfa_path: Path to a GFA v1 file, or '-' for standard input

    Returns:
        A validated VariationGraph.

    Raises:
        FileNotFoundError: If gfa_path does not exist.
    """
    if str(gfa_path) == '-':
        logger.info("Loading graph from GFA on standard input")
        graph = read_gfa(sys.stdin)
    else:
        gfa_path = Path(gfa_path)
        if not gfa_path.exists():
            raise FileNotFoundError(f"GFA file not found: {gfa_path}")

        logger.info(f"Loading graph from GFA: {gfa_path}")
        with open(gfa_path, 'r') as f:
            graph = read_gfa(f)

    graph.validate()
    logger.info(
        f"Loaded graph: {graph.node_count} nodes, {graph.edge_count} edges, "
        f"{graph.path_count} paths, {graph.total_length():,} bp"
    )
    return graph


# ============================================================================
#                           GFA WRITER (Graph Export)
# ============================================================================

def write_gfa(graph: VariationGraph, stream: TextIO):
    """Write a graph as GFA v1 using node ids as segment names."""
    stream.write(f"H\tVN:Z:{GFA_VERSION}\n")
    for node in graph.nodes():
        stream.write(GFASegment(str(node.id), node.sequence, node.length).to_gfa_line() + "\n")
    for from_handle, to_handle in graph.edges():
        link = GFALink(str(from_handle.node_id), from_handle.orientation,
                       str(to_handle.node_id), to_handle.orientation)
        stream.write(link.to_gfa_line() + "\n")
    for path in graph.paths():
        gfa_path = GFAPath(path.name, [(str(h.node_id), h.orientation) for h in path.steps])
        stream.write(gfa_path.to_gfa_line() + "\n")


def export_graph_to_gfa(graph: VariationGraph, output_path: Union[str, Path]) -> None:
    """Export a variation graph to a GFA v1 file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Exporting graph to GFA: {output_path}")
    with open(output_path, 'w') as f:
        write_gfa(graph, f)
    logger.info(f"GFA export complete: {output_path}")


def gfa_stats(gfa_path: Union[str, Path]) -> Dict[str, int]:
    """
    Return basic statistics for a GFA file.

    Returns:
        Dict with keys: 'segments', 'links', 'paths', 'total_length'

    Useful for checking user-provided GFA before binning.
    """
    graph = load_graph_from_gfa(gfa_path)
    return {
        'segments': graph.node_count,
        'links': graph.edge_count,
        'paths': graph.path_count,
        'total_length': graph.total_length(),
    }


__all__ = [
    'assign_ids',
    'read_gfa',
    'load_graph_from_gfa',
    'write_gfa',
    'export_graph_to_gfa',
    'gfa_stats',
    'GFASegment',
    'GFALink',
    'GFAPath',
]

# panbin v0.1.0
# Any usage is subject to this software's license.
