"""Structured JSON logging for batch and service use."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from payback_solar.config import settings


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Include extra fields
        for key in ("uf", "cenario", "ano", "unidade", "taxa"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(json_format: Optional[bool] = None, level: int = logging.INFO) -> None:
    """Configure root logger. json_format defaults to PAYBACK_LOG_JSON."""
    if json_format is None:
        json_format = settings.log_json

    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()
    root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("kaleido").setLevel(logging.WARNING)
