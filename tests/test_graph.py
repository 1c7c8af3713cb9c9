#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Tests for the variation graph model.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import pytest

from panbin.errors import GraphConsistencyError
from panbin.graph import Handle, Node, PathRecord, VariationGraph


class TestNodeOffsets:
    """Test the absolute coordinate space."""

    def test_offsets_follow_insertion_order(self, graph_factory):
        graph = graph_factory(["AAA", "CC", "GGGG"], {})

        assert [graph.node_absolute_offset(i) for i in (1, 2, 3)] == [0, 3, 5]
        assert graph.total_length() == 9

    def test_offsets_refresh_after_add(self, graph_factory):
        graph = graph_factory(["AAA"], {})
        graph.node_absolute_offset(1)

        graph.add_node(Node(id=2, sequence="CC"))

        assert graph.node_absolute_offset(2) == 3

    def test_unknown_node(self, graph_factory):
        graph = graph_factory(["AAA"], {})

        with pytest.raises(GraphConsistencyError):
            graph.node_absolute_offset(7)


class TestGraphValidation:
    """Test consistency checks."""

    def test_valid_graph(self, two_node_graph):
        two_node_graph.validate()

    def test_length_mismatch(self):
        graph = VariationGraph()
        graph.add_node(Node(id=1, sequence="ACGT", length=3))

        with pytest.raises(GraphConsistencyError):
            graph.validate()

    def test_empty_sequence_with_declared_length(self):
        graph = VariationGraph()
        graph.add_node(Node(id=1, sequence="", length=10))

        with pytest.raises(GraphConsistencyError):
            graph.validate()

    def test_dangling_path_step(self, two_node_graph):
        two_node_graph.add_path(PathRecord("y", (Handle(3),)))

        with pytest.raises(GraphConsistencyError):
            two_node_graph.validate()

    def test_dangling_edge(self, two_node_graph):
        two_node_graph.add_edge(Handle(1), Handle(5))

        with pytest.raises(GraphConsistencyError):
            two_node_graph.validate()

    def test_duplicate_node_and_path(self, two_node_graph):
        with pytest.raises(GraphConsistencyError):
            two_node_graph.add_node(Node(id=1, sequence="A"))
        with pytest.raises(GraphConsistencyError):
            two_node_graph.add_path(PathRecord("x"))

    def test_non_positive_id(self):
        with pytest.raises(GraphConsistencyError):
            Node(id=0, sequence="A")

    def test_paths_are_restartable(self, two_node_graph):
        assert [p.name for p in two_node_graph.paths()] == ["x"]
        assert [p.name for p in two_node_graph.paths()] == ["x"]

    def test_handle_flip(self):
        assert Handle(4).flip() == Handle(4, True)
        assert Handle(4, True).orientation == '-'

# panbin v0.1.0
# Any usage is subject to this software's license.
