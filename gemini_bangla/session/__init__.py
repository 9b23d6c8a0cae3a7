from __future__ import annotations

"""
Session layer:
- aggregate profile context from Mongo
- build user turns
- load/save/clear chat history
- run the session lifecycle (init, send, reset)
"""

from gemini_bangla.session import context_aggregator, history_store, turn_builder, session_manager

__all__ = [
    "context_aggregator",
    "history_store",
    "session_manager",
    "turn_builder",
]
