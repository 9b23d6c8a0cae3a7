from typing import Optional


class AppError(Exception):
    """Base application error"""


class ConfigurationError(AppError):
    """Missing or invalid configuration (API key, env vars)"""


class ContextFetchError(AppError):
    """A profile lookup failed for a reason other than not-found"""

    def __init__(self, source: str, detail: Optional[str] = None):
        self.source = source
        msg = f"Failed to fetch context source: {source}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class CompletionFailure(AppError):
    """Remote completion round trip failed. Carries no provider detail."""


class PersistenceError(AppError):
    """Chat history read/write/delete failure"""


class EmptyMessageError(AppError, ValueError):
    """Send requested with neither text nor image"""
