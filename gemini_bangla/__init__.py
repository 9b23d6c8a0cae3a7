from __future__ import annotations

"""
Gemini Bangla assistant session core.
"""
