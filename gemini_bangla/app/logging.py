from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Iterable

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# SDK/transport loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "pymongo")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line: ts, level, name, msg, any `extra=` fields
    (user_id, source, ...) and exc_info when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", *, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))
