#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Version information.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

__version__ = "0.1.0"

# panbin v0.1.0
# Any usage is subject to this software's license.
