#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Tests for bin grid derivation and coordinate lookups.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import math

import pytest

from panbin.binning import BinGrid
from panbin.errors import ConfigurationError


class TestGridDerivation:
    """Test derivation of bin width and bin count."""

    def test_width_from_count(self):
        """bin_width = ceil(total / num_bins) when only a count is given."""
        grid = BinGrid.build(25, num_bins=3)

        assert grid.bin_width == 9
        assert grid.num_bins == 3

    @pytest.mark.parametrize("total, count, width, bins", [(5, 10, 1, 5), (20, 6, 4, 5)])
    def test_count_shrinks_to_populated_bins(self, total, count, width, bins):
        """A rounded-up width never leaves bins past the end of the graph."""
        grid = BinGrid.build(total, num_bins=count)

        assert (grid.bin_width, grid.num_bins) == (width, bins)
        assert all(grid.bin_start(b) < grid.bin_end(b) for b in range(grid.num_bins))
        assert grid.bin_end(grid.num_bins - 1) == total

    def test_count_from_width(self):
        """num_bins = ceil(total / bin_width) when only a width is given."""
        grid = BinGrid.build(25, bin_width=10)

        assert grid.num_bins == 3
        assert grid.bin_width == 10

    def test_width_wins_when_both_given(self):
        """The bin count is recomputed from the width."""
        grid = BinGrid.build(100, num_bins=7, bin_width=20)

        assert grid.bin_width == 20
        assert grid.num_bins == 5

    def test_both_zero_is_configuration_error(self):
        """No width and no count cannot build a grid."""
        with pytest.raises(ConfigurationError):
            BinGrid.build(100, num_bins=0, bin_width=0)

    def test_negative_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            BinGrid.build(100, bin_width=-5)

    @pytest.mark.parametrize("total", [1, 7, 10, 99, 1000, 1001])
    @pytest.mark.parametrize("count", [1, 2, 3, 10, 64])
    def test_every_position_maps_inside_count(self, total, count):
        """Every position in [0, total) lands in [0, num_bins)."""
        grid = BinGrid.build(total, num_bins=count)

        assert grid.bin_width == max(math.ceil(total / count), 1)
        assert all(0 <= grid.bin_of(p) < grid.num_bins for p in range(total))

    @pytest.mark.parametrize("total", [1, 7, 10, 99, 1000])
    @pytest.mark.parametrize("width", [1, 3, 10, 128])
    def test_every_position_maps_inside_width(self, total, width):
        grid = BinGrid.build(total, bin_width=width)

        assert grid.num_bins == math.ceil(total / width)
        assert grid.bin_of(total - 1) == grid.num_bins - 1

    def test_grid_is_immutable(self):
        grid = BinGrid.build(10, bin_width=5)

        with pytest.raises(AttributeError):
            grid.bin_width = 2


class TestGridLookups:
    """Test position and span lookups."""

    def test_bin_of_is_integer_division(self):
        grid = BinGrid.build(30, bin_width=10)

        assert grid.bin_of(0) == 0
        assert grid.bin_of(9) == 0
        assert grid.bin_of(10) == 1
        assert grid.bin_of(29) == 2

    def test_bin_of_out_of_range(self):
        grid = BinGrid.build(30, bin_width=10)

        with pytest.raises(ValueError):
            grid.bin_of(30)

    def test_last_bin_is_clipped(self):
        grid = BinGrid.build(25, bin_width=10)

        assert grid.bin_start(2) == 20
        assert grid.bin_end(2) == 25

    def test_span_inside_one_bin(self):
        grid = BinGrid.build(30, bin_width=10)

        assert grid.bins_overlapping(12, 18) == [(1, 12, 18)]

    def test_span_crossing_bins(self):
        """A span crossing two boundaries is split in three clipped pieces."""
        grid = BinGrid.build(40, bin_width=10)

        assert grid.bins_overlapping(5, 32) == [(0, 5, 10), (1, 10, 20), (2, 20, 30), (3, 30, 32)]

    def test_empty_span(self):
        grid = BinGrid.build(40, bin_width=10)

        assert grid.bins_overlapping(7, 7) == []

# panbin v0.1.0
# Any usage is subject to this software's license.
