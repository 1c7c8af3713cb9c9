#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Tests for the path walker.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import pytest

from panbin.binning import BinGrid, walk_path
from panbin.errors import GraphConsistencyError
from panbin.graph import Handle, PathRecord


class TestWalkPath:
    """Test conversion of handles to traversal events."""

    def test_one_event_per_node_inside_bins(self, two_node_graph):
        """Nodes aligned with bins give one full-width event each."""
        grid = BinGrid.build(two_node_graph.total_length(), bin_width=10)
        path = next(two_node_graph.paths())

        events = list(walk_path(path, two_node_graph, grid))

        assert [e.bin_id for e in events] == [0, 1]
        assert [e.overlap_len for e in events] == [10, 10]
        assert events[0].absolute_midpoint == 4.5
        assert events[1].absolute_midpoint == 14.5
        assert (events[1].node_local_start, events[1].node_local_end) == (0, 9)

    def test_node_crossing_bins_is_clipped(self, graph_factory):
        """A 25 bp node over width-10 bins yields three clipped events."""
        graph = graph_factory(["A" * 25], {"p": "1+"})
        grid = BinGrid.build(25, bin_width=10)

        events = list(walk_path(next(graph.paths()), graph, grid))

        assert [(e.bin_id, e.overlap_len) for e in events] == [(0, 10), (1, 10), (2, 5)]
        assert [(e.node_local_start, e.node_local_end) for e in events] == [(0, 9), (10, 19), (20, 24)]

    def test_reverse_step_walks_bins_backwards(self, graph_factory):
        """Reverse traversal visits bins in descending order, coordinates stay forward."""
        graph = graph_factory(["A" * 25], {"p": "1-"})
        grid = BinGrid.build(25, bin_width=10)

        events = list(walk_path(next(graph.paths()), graph, grid))

        assert [e.bin_id for e in events] == [2, 1, 0]
        assert all(e.is_reverse for e in events)
        assert (events[0].node_local_start, events[0].node_local_end) == (20, 24)

    def test_reverse_node_in_one_bin_keeps_forward_range(self, graph_factory):
        """first/last stay 0..19 for a reverse 20 bp node."""
        graph = graph_factory(["G" * 20], {"p": "1-"})
        grid = BinGrid.build(20, bin_width=100)

        (event,) = walk_path(next(graph.paths()), graph, grid)

        assert (event.node_local_start, event.node_local_end) == (0, 19)
        assert event.is_reverse

    def test_missing_node_raises(self, two_node_graph):
        grid = BinGrid.build(20, bin_width=10)
        path = PathRecord(name="bad", steps=(Handle(1), Handle(42)))

        with pytest.raises(GraphConsistencyError):
            list(walk_path(path, two_node_graph, grid))

    def test_walk_is_lazy(self, two_node_graph):
        """Events are produced on demand, so the error only surfaces when reached."""
        grid = BinGrid.build(20, bin_width=10)
        path = PathRecord(name="bad", steps=(Handle(1), Handle(42)))

        events = walk_path(path, two_node_graph, grid)
        first = next(events)

        assert first.bin_id == 0
        with pytest.raises(GraphConsistencyError):
            next(events)

# panbin v0.1.0
# Any usage is subject to this software's license.
