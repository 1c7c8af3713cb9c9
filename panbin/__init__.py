#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Package initialization and version metadata.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

from .version import __version__

__all__ = ["__version__"]

# panbin v0.1.0
# Any usage is subject to this software's license.
