#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Bin-to-bin link collection for a single path.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from typing import List, Optional, Set, Tuple

from ..errors import AccumulatorStateError

Link = Tuple[int, int]


class LinkCollector:
    """
    Ordered, deduplicated transitions between consecutive bins of a path.

    Links keep first-observed order (not bin order) so renderers can follow
    the direction in which the path moved.
    """

    def __init__(self):
        self._links: List[Link] = []
        self._seen: Set[Link] = set()
        self._finalized = False

    def observe_transition(self, prev_bin_id: Optional[int], bin_id: int):
        """Record prev_bin_id -> bin_id unless it is a self link or a repeat."""
        if self._finalized:
            raise AccumulatorStateError("observe_transition() called after finalize()")
        if prev_bin_id is None or prev_bin_id == bin_id:
            return
        link = (prev_bin_id, bin_id)
        if link not in self._seen:
            self._seen.add(link)
            self._links.append(link)

    def finalize(self) -> List[Link]:
        if self._finalized:
            raise AccumulatorStateError("finalize() called twice")
        self._finalized = True
        self._seen = set()
        return self._links

    def __len__(self) -> int:
        return len(self._links)
