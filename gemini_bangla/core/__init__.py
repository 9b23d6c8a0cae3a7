from __future__ import annotations

"""
This module provides core functionality for the application.

It includes utilities for clock operations and general helpers.
"""

from gemini_bangla.core import clock, utils

__all__ = [
    "clock",
    "utils"
]
