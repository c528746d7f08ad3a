"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - Every record carries timestamp, level, logger name, message and, once
      configured, the service name
    - Catalog fields (error_code, entity_kind, natural_key, owner_id,
      dependent_count, skipped, path) appear only when passed via `extra`
    - JSON in production, one human-readable line per record in development
    - setup_logging is idempotent: repeated lifespans never stack handlers

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called from the lifespan and from the seed CLI
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "error_code", "entity_kind", "natural_key", "owner_id",
    "dependent_count", "skipped", "path",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            log["service"] = self.service
        for key in _EXTRA_FIELDS:
            value = record.__dict__.get(key)
            if value is not None:
                log[key] = value
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        # Natural keys may be ints or dates; str() keeps the line valid JSON
        return json.dumps(log, ensure_ascii=False, default=str)


class _CatalogHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json", service: str | None = None):
    """Install the catalog handler on the root logger, replacing a previous one."""
    for existing in list(logging.root.handlers):
        if isinstance(existing, _CatalogHandler):
            logging.root.removeHandler(existing)

    handler = _CatalogHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter(service))
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
