#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Bin grid over the absolute coordinate space of a graph.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


@dataclass(frozen=True)
class BinGrid:
    """
    Fixed partition of [0, total_length) into equal-width bins.

    Bin i owns [i * bin_width, min((i + 1) * bin_width, total_length)).
    Build it with BinGrid.build(); the grid never changes afterwards.
    """
    total_length: int
    num_bins: int
    bin_width: int

    @classmethod
    def build(cls, total_length: int, num_bins: int = 0, bin_width: int = 0) -> 'BinGrid':
        """
        Derive the grid from a bin count or a bin width.

        Args:
            total_length: Total sequence length of the graph in bp
            num_bins: Requested number of bins (0 = derive from width)
            bin_width: Requested bin width in bp (0 = derive from count)

        Returns:
            BinGrid

        Raises:
            ConfigurationError: If both inputs are zero or any is negative
        """
        num_bins = num_bins or 0
        bin_width = bin_width or 0
        if total_length < 0 or num_bins < 0 or bin_width < 0:
            raise ConfigurationError(
                f"negative binning parameter (total_length={total_length}, "
                f"num_bins={num_bins}, bin_width={bin_width})"
            )
        if num_bins == 0 and bin_width == 0:
            raise ConfigurationError("a bin width or a bin count is required")

        if bin_width:
            # Width is the physical unit, so it wins over a requested count
            if num_bins:
                logger.debug(f"Both num_bins={num_bins} and bin_width={bin_width} given; "
                             f"using bin width")
            num_bins = _ceil_div(total_length, bin_width)
        else:
            bin_width = max(_ceil_div(total_length, num_bins), 1)
            # Rounding the width up can leave trailing bins with no coordinates
            num_bins = _ceil_div(total_length, bin_width)

        logger.debug(f"Bin grid: {num_bins} bins of {bin_width} bp over {total_length} bp")
        return cls(total_length=total_length, num_bins=num_bins, bin_width=bin_width)

    def bin_of(self, position: int) -> int:
        """Bin id of an absolute position."""
        if position < 0 or position >= self.total_length:
            raise ValueError(f"Position {position} outside [0, {self.total_length})")
        return position // self.bin_width

    def bin_start(self, bin_id: int) -> int:
        return bin_id * self.bin_width

    def bin_end(self, bin_id: int) -> int:
        """Exclusive end of a bin, clipped to the graph length."""
        return min((bin_id + 1) * self.bin_width, self.total_length)

    def bins_overlapping(self, start: int, end: int) -> List[Tuple[int, int, int]]:
        """
        Split a half-open span at bin boundaries.

        Args:
            start: Inclusive absolute start
            end: Exclusive absolute end

        Returns:
            List of (bin_id, overlap_start, overlap_end) in ascending bin order;
            empty for an empty span.
        """
        if start < 0 or end > self.total_length or start > end:
            raise ValueError(f"Span [{start}, {end}) outside [0, {self.total_length})")
        pieces = []
        pos = start
        while pos < end:
            bin_id = pos // self.bin_width
            piece_end = min(end, (bin_id + 1) * self.bin_width)
            pieces.append((bin_id, pos, piece_end))
            pos = piece_end
        return pieces

    def __len__(self) -> int:
        return self.num_bins


# panbin v0.1.0
# Any usage is subject to this software's license.
