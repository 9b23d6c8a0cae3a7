from __future__ import annotations

"""
LLM layer: prompt templates + provider clients.
"""

from gemini_bangla.llms import prompt_registry, providers

__all__ = [
    "prompt_registry",
    "providers",
]
