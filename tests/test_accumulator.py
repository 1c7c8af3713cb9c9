#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Tests for per-path bin accumulation and link collection.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import pytest

from panbin.binning import (
    BinAccumulator,
    BinGrid,
    LinkCollector,
    PathBinRecord,
    TraversalEvent,
    merge_records,
    walk_path,
)
from panbin.errors import AccumulatorStateError


def _event(bin_id, overlap, reverse=False, mid=0.0, start=0, end=None):
    end = start + overlap - 1 if end is None else end
    return TraversalEvent(bin_id, overlap, reverse, mid, start, end)


class TestBinAccumulator:
    """Test running sums and mean reduction."""

    def test_node_spanning_three_bins(self, graph_factory):
        """25 bp node on width-10 bins: 1.0, 1.0, 0.5 coverage and no fourth bin."""
        graph = graph_factory(["A" * 25], {"p": "1+"})
        grid = BinGrid.build(25, bin_width=10)
        acc = BinAccumulator(grid.bin_width)

        for event in walk_path(next(graph.paths()), graph, grid):
            acc.observe(event)
        bins = acc.finalize()

        assert list(bins) == [0, 1, 2]
        assert bins[0].mean_cov == 1.0
        assert bins[1].mean_cov == 1.0
        assert bins[2].mean_cov == 0.5
        assert (bins[0].first_nucleotide, bins[0].last_nucleotide) == (0, 9)
        assert (bins[2].first_nucleotide, bins[2].last_nucleotide) == (20, 24)

    def test_consecutive_nodes_in_one_bin_form_one_span(self):
        """Two adjacent 5 bp nodes in a width-10 bin add up to full coverage."""
        acc = BinAccumulator(10)

        acc.observe(_event(0, 5, mid=2.0, start=0))
        acc.observe(_event(0, 5, mid=7.0, start=0))
        record = acc.finalize()[0]

        assert record.mean_cov == 1.0
        assert record.contributions == 1
        assert record.mean_pos == 4.5

    def test_revisit_is_averaged(self):
        """Leaving and re-entering a bin adds a second contribution."""
        acc = BinAccumulator(10)

        acc.observe(_event(0, 10, mid=4.5))
        acc.observe(_event(1, 4, mid=11.5))
        acc.observe(_event(0, 5, reverse=True, mid=2.0))
        bins = acc.finalize()

        assert bins[0].contributions == 2
        assert bins[0].mean_cov == pytest.approx((1.0 + 0.5) / 2)
        assert bins[0].mean_inv == pytest.approx(0.5)
        assert bins[0].mean_pos == pytest.approx((4.5 + 2.0) / 2)
        assert bins[1].mean_cov == pytest.approx(0.4)

    def test_mean_is_sum_over_count(self):
        """mean_cov equals the coverage sum divided by the contribution count."""
        acc = BinAccumulator(10)
        for bin_id in [3, 4, 3, 4, 3]:
            acc.observe(_event(bin_id, 2))
        bins = acc.finalize()

        assert bins[3].contributions == 3
        assert bins[3].mean_cov == pytest.approx((3 * 0.2) / 3)
        assert bins[4].contributions == 2

    def test_reverse_fraction_within_span(self):
        """mean_inv is the share of reverse bases inside the span."""
        acc = BinAccumulator(10)

        acc.observe(_event(0, 6))
        acc.observe(_event(0, 4, reverse=True))

        assert acc.finalize()[0].mean_inv == pytest.approx(0.4)

    def test_nucleotide_range_widens(self):
        acc = BinAccumulator(100)

        acc.observe(_event(0, 5, start=10))
        acc.observe(_event(0, 5, start=2))

        record = acc.finalize()[0]
        assert (record.first_nucleotide, record.last_nucleotide) == (2, 14)

    def test_output_is_in_ascending_bin_order(self):
        acc = BinAccumulator(10)
        for bin_id in [5, 1, 3]:
            acc.observe(_event(bin_id, 10))

        assert list(acc.finalize()) == [1, 3, 5]

    def test_observe_after_finalize_fails(self):
        acc = BinAccumulator(10)
        acc.finalize()

        with pytest.raises(AccumulatorStateError):
            acc.observe(_event(0, 1))

    def test_double_finalize_fails(self):
        acc = BinAccumulator(10)
        acc.finalize()

        with pytest.raises(AccumulatorStateError):
            acc.finalize()


class TestMergeRecords:
    """Test contribution-weighted merging."""

    def test_weighted_mean(self):
        a = PathBinRecord(0, 1.0, 0.0, 5.0, 0, 9, contributions=1)
        b = PathBinRecord(0, 0.4, 1.0, 2.0, 2, 5, contributions=3)

        merged = merge_records([a, b])

        assert merged.contributions == 4
        assert merged.mean_cov == pytest.approx((1.0 + 1.2) / 4)
        assert merged.mean_inv == pytest.approx(0.75)
        assert merged.mean_pos == pytest.approx((5.0 + 6.0) / 4)
        assert (merged.first_nucleotide, merged.last_nucleotide) == (0, 9)

    def test_different_bins_rejected(self):
        with pytest.raises(ValueError):
            merge_records([PathBinRecord(0, 1, 0, 0, 0, 0), PathBinRecord(1, 1, 0, 0, 0, 0)])


class TestLinkCollector:
    """Test link deduplication and ordering."""

    def _collect(self, bins):
        collector = LinkCollector()
        prev = None
        for bin_id in bins:
            collector.observe_transition(prev, bin_id)
            prev = bin_id
        return collector.finalize()

    def test_dedup_keeps_first_observed_order(self):
        """0,1,0,1,2 -> (0,1),(1,0),(1,2)"""
        assert self._collect([0, 1, 0, 1, 2]) == [(0, 1), (1, 0), (1, 2)]

    def test_self_links_suppressed(self):
        assert self._collect([4, 4, 4, 5, 5]) == [(4, 5)]

    def test_first_event_has_no_link(self):
        assert self._collect([7]) == []

    def test_not_sorted_by_bin(self):
        assert self._collect([3, 2, 1]) == [(3, 2), (2, 1)]

    def test_observe_after_finalize_fails(self):
        collector = LinkCollector()
        collector.finalize()

        with pytest.raises(AccumulatorStateError):
            collector.observe_transition(0, 1)

# panbin v0.1.0
# Any usage is subject to this software's license.
