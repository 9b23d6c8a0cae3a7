from __future__ import annotations

"""
Callable entrypoints that wire settings, Mongo and the session manager.
"""
