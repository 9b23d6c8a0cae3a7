from __future__ import annotations
import os
from dataclasses import dataclass

from gemini_bangla.app.errors import ConfigurationError

def _get_env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise ConfigurationError(f"Missing required env var: {name}")
    return v

def _get_float(name: str) -> float | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid float for env var {name}: {raw!r}") from e

@dataclass(frozen=True)
class Settings:
    # Mongo
    mongo_uri: str
    mongo_db: str

    # Gemini
    gemini_api_key: str | None
    gemini_model: str
    gemini_timeout_s: float | None

    log_level: str

def load_settings() -> Settings:
    return Settings(
        mongo_uri=_get_env("MONGO_URI"),
        mongo_db=os.getenv("MONGO_DB", "gemini_bangla"),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        gemini_timeout_s=_get_float("GEMINI_TIMEOUT_S"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
