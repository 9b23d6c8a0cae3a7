from __future__ import annotations

"""
Providers (Gemini)
"""

from gemini_bangla.llms.providers import gemini_client

__all__ = [
    "gemini_client",
]
