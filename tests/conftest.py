#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Pytest configuration and shared fixtures.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from panbin.graph import Handle, Node, PathRecord, VariationGraph


def make_graph(sequences, paths):
    """
    Build a VariationGraph from node sequences and path specs.

    Args:
        sequences: Node sequences; node ids are 1..n in this order
        paths: {name: "1+,2-,..."}
    """
    graph = VariationGraph()
    for node_id, seq in enumerate(sequences, 1):
        graph.add_node(Node(id=node_id, sequence=seq))
    for name, walk in paths.items():
        steps = tuple(Handle(int(step[:-1]), step[-1] == '-') for step in walk.split(','))
        graph.add_path(PathRecord(name=name, steps=steps))
    return graph


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="panbin_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def graph_factory():
    """Expose make_graph to tests."""
    return make_graph


@pytest.fixture
def two_node_graph():
    """Node 1 = 10 x A, node 2 = 10 x C, one forward path over both."""
    return make_graph(["A" * 10, "C" * 10], {"x": "1+,2+"})


@pytest.fixture
def simple_gfa():
    """GFA v1 text for a small bubble graph with three PanSN-named paths."""
    return (
        "H\tVN:Z:1.0\n"
        "S\t1\tAAAAAAAAAA\n"
        "S\t2\tCCCCC\n"
        "S\t3\tGGGGG\n"
        "S\t4\tTTTTTTTTTT\n"
        "L\t1\t+\t2\t+\t0M\n"
        "L\t1\t+\t3\t+\t0M\n"
        "L\t2\t+\t4\t+\t0M\n"
        "L\t3\t+\t4\t+\t0M\n"
        "P\tHG1#1#chr1\t1+,2+,4+\t*\n"
        "P\tHG1#2#chr1\t1+,3+,4+\t*\n"
        "P\tHG2#1#chr1\t4-,2-,1-\t*\n"
    )


@pytest.fixture
def simple_gfa_file(temp_output_dir, simple_gfa):
    """simple_gfa written to disk."""
    path = temp_output_dir / "graph.gfa"
    path.write_text(simple_gfa)
    return path

# panbin v0.1.0
# Any usage is subject to this software's license.
