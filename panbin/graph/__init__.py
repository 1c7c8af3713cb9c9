"""
panbin v0.1.0

Variation graph model consumed by the binning engine.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from .data_structures import (
    Handle,
    Node,
    PathRecord,
    PathGraph,
    VariationGraph,
)

__all__ = [
    "Handle",
    "Node",
    "PathRecord",
    "PathGraph",
    "VariationGraph",
]
