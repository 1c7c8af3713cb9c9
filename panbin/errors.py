#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Exception hierarchy shared by the graph, I/O and binning layers.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""


class PanbinError(Exception):
    """Base class for all panbin errors."""
    pass


class ConfigurationError(PanbinError, ValueError):
    """Raised when binning parameters cannot produce a bin grid."""
    pass


class GraphConsistencyError(PanbinError):
    """
    Raised when the graph contradicts itself.

    Examples are a path step naming a node that does not exist, or a node
    whose declared length differs from the length of its sequence.
    """
    pass


class DuplicateIdentifierError(PanbinError):
    """Raised when an identifier is seen twice while assigning node ids."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Duplicated identifier in graph input: {identifier}")


class GFAFormatError(PanbinError, ValueError):
    """Raised on a GFA line that cannot be parsed."""

    def __init__(self, message: str, line_no: int = None):
        self.line_no = line_no
        if line_no is not None:
            message = f"GFA line {line_no}: {message}"
        super().__init__(message)


class AccumulatorStateError(PanbinError, RuntimeError):
    """Raised when a per-path collector is used after it was finalized."""
    pass


__all__ = [
    'PanbinError',
    'ConfigurationError',
    'GraphConsistencyError',
    'DuplicateIdentifierError',
    'GFAFormatError',
    'AccumulatorStateError',
]
