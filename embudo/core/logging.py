"""EMBUDO — Structured JSON Logging.

One JSON object per line on stdout. Import and sync events carry their
context (`source`, `layout`, `records`, ...) as top-level keys so a log
query can follow an import from parse to store.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from embudo.config import settings

IMPORT_LOG_FIELDS = ("source", "layout", "rows", "records", "date", "status_code")

# httpx logs every sheet fetch at INFO; the sheet client logs its own summary
logging.getLogger("httpx").setLevel(logging.WARNING)


class JSONFormatter(logging.Formatter):
    """Produces structured JSON log lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in IMPORT_LOG_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)
        # Sheet headers are Spanish: keep "Inversión" readable
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return `embudo.<name>` with the JSON stdout handler attached once."""
    logger = logging.getLogger(f"embudo.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
