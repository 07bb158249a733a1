from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from travel_api.core.request_context import get_request_id, get_user_id, get_user_role

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# (pattern, replacement); applied in order to the message and tracebacks
_MASKING_RULES = [
    (re.compile(r"(authorization\s*[:=]\s*bearer\s+)([^\s\"]+)", re.IGNORECASE), r"\1***"),
    (re.compile(r"((?:token|password|secret)\s*[:=]\s*)([^\s\",}]+)", re.IGNORECASE), r"\1***"),
    (re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+"), "***jwt***"),
    (re.compile(r"\b([A-Za-z0-9])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+\.[A-Za-z]{2,})\b"), r"\1***\2"),
]

# request attributes passed through ``extra=`` by the observability middleware
_REQUEST_FIELDS = ("endpoint", "method", "status_code")


def mask_sensitive(value: str) -> str:
    for pattern, replacement in _MASKING_RULES:
        value = pattern.sub(replacement, value)
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per line, tagged with the caller identity of the request."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "request_id": getattr(record, "request_id", None) or get_request_id(),
            "user_id": getattr(record, "user_id", None) or get_user_id(),
            "user_role": getattr(record, "user_role", None) or get_user_role(),
            "message": mask_sensitive(self.formatMessage(record)),
            "duration_ms": getattr(record, "duration_ms", None),
        }
        for field in _REQUEST_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = mask_sensitive(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or LOG_LEVEL).upper()
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter("%(message)s"))
    root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)
