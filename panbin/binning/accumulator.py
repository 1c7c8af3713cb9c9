#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Per-path bin statistics: running sums while a path is walked, reduced to
mean-valued PathBinRecords once the path is exhausted.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..errors import AccumulatorStateError
from .walker import TraversalEvent


@dataclass(frozen=True)
class PathBinRecord:
    """
    Summary of one path inside one bin.

    Attributes:
        bin_id: Bin identifier
        mean_cov: Mean fraction of the bin covered per traversal span
        mean_inv: Mean fraction of reverse-oriented bases per span
        mean_pos: Mean absolute position per span
        first_nucleotide: Lowest node-local offset touched (forward coordinates)
        last_nucleotide: Highest node-local offset touched (forward coordinates)
        contributions: Number of traversal spans averaged into the means
    """
    bin_id: int
    mean_cov: float
    mean_inv: float
    mean_pos: float
    first_nucleotide: int
    last_nucleotide: int
    contributions: int = 1

    def as_row(self) -> list:
        """[bin_id, mean_cov, mean_inv, mean_pos, first_nucleotide, last_nucleotide]"""
        return [self.bin_id, self.mean_cov, self.mean_inv, self.mean_pos,
                self.first_nucleotide, self.last_nucleotide]


@dataclass
class _RunningSums:
    coverage: float = 0.0
    inversion: float = 0.0
    position: float = 0.0
    count: int = 0
    first_nucleotide: Optional[int] = None
    last_nucleotide: Optional[int] = None


class BinAccumulator:
    """
    Sparse bin_id -> running sums map for a single path.

    A traversal span is a maximal run of consecutive events landing in the
    same bin. Each span contributes its coverage (bases / bin width), its
    reverse-base fraction and its base-weighted mean position once; the
    finalized means divide those sums by the number of spans. A path that
    leaves a bin and comes back (duplication, local inversion) therefore
    adds a second span to that bin.
    """

    def __init__(self, bin_width: int):
        if bin_width <= 0:
            raise ValueError(f"bin_width must be positive, got {bin_width}")
        self.bin_width = bin_width
        self._sums: Dict[int, _RunningSums] = {}
        self._finalized = False
        self._reset_span()

    def _reset_span(self):
        self._span_bin: Optional[int] = None
        self._span_bp = 0
        self._span_reverse_bp = 0
        self._span_position = 0.0

    def _close_span(self):
        if self._span_bin is None:
            return
        sums = self._sums[self._span_bin]
        sums.coverage += self._span_bp / self.bin_width
        sums.inversion += self._span_reverse_bp / self._span_bp
        sums.position += self._span_position / self._span_bp
        sums.count += 1
        self._reset_span()

    def observe(self, event: TraversalEvent):
        """Fold one traversal event into the running sums of its bin."""
        if self._finalized:
            raise AccumulatorStateError("observe() called after finalize()")
        if event.overlap_len <= 0:
            return

        if event.bin_id != self._span_bin:
            self._close_span()
            self._span_bin = event.bin_id

        self._span_bp += event.overlap_len
        if event.is_reverse:
            self._span_reverse_bp += event.overlap_len
        self._span_position += event.absolute_midpoint * event.overlap_len

        sums = self._sums.get(event.bin_id)
        if sums is None:
            sums = self._sums[event.bin_id] = _RunningSums()
        if sums.first_nucleotide is None or event.node_local_start < sums.first_nucleotide:
            sums.first_nucleotide = event.node_local_start
        if sums.last_nucleotide is None or event.node_local_end > sums.last_nucleotide:
            sums.last_nucleotide = event.node_local_end

    def finalize(self) -> Dict[int, PathBinRecord]:
        """
        Reduce the running sums to means.

        Returns:
            Dict bin_id -> PathBinRecord, in ascending bin id order
        """
        if self._finalized:
            raise AccumulatorStateError("finalize() called twice")
        self._close_span()
        self._finalized = True

        records = {}
        for bin_id in sorted(self._sums):
            sums = self._sums[bin_id]
            records[bin_id] = PathBinRecord(
                bin_id=bin_id,
                mean_cov=sums.coverage / sums.count,
                mean_inv=sums.inversion / sums.count,
                mean_pos=sums.position / sums.count,
                first_nucleotide=sums.first_nucleotide,
                last_nucleotide=sums.last_nucleotide,
                contributions=sums.count,
            )
        self._sums = {}
        return records

    def __len__(self) -> int:
        return len(self._sums)


def merge_records(records: Iterable[PathBinRecord]) -> PathBinRecord:
    """
    Combine records of the same bin from several paths.

    Means are re-weighted by each record's contribution count, so the
    result equals what a single accumulator would have produced from all
    the underlying spans.
    """
    records: List[PathBinRecord] = list(records)
    if not records:
        raise ValueError("merge_records() needs at least one record")
    bin_ids = {r.bin_id for r in records}
    if len(bin_ids) != 1:
        raise ValueError(f"cannot merge records of different bins: {sorted(bin_ids)}")

    total = sum(r.contributions for r in records)
    return PathBinRecord(
        bin_id=records[0].bin_id,
        mean_cov=sum(r.mean_cov * r.contributions for r in records) / total,
        mean_inv=sum(r.mean_inv * r.contributions for r in records) / total,
        mean_pos=sum(r.mean_pos * r.contributions for r in records) / total,
        first_nucleotide=min(r.first_nucleotide for r in records),
        last_nucleotide=max(r.last_nucleotide for r in records),
        contributions=total,
    )


# panbin v0.1.0
# Any usage is subject to this software's license.
