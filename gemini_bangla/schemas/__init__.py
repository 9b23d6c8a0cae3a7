from __future__ import annotations

"""
Chat data model shared by the provider, storage and session layers.
"""

from gemini_bangla.schemas import chat_schema

__all__ = [
    "chat_schema",
]
