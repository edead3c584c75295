"""
Structured Logging Configuration Module

Every log line is one JSON object. Authentication outcomes, ownership
denials and expense changes are logged through ``log_action``, which attaches
who acted (``user_id``), what they did (``action``) and on what
(``resource``). Credentials never reach the output: values under sensitive
keys in ``extra`` are replaced before formatting.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


ROOT_LOGGER = "expense_tracker"

STRUCTURED_FIELDS = ("user_id", "action", "resource")

SENSITIVE_KEYS = frozenset({
    "password", "password_hash", "token", "access_token", "authorization",
})
REDACTED = "[redacted]"


def redact(details: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``details`` with sensitive values masked, recursing into dicts"""
    clean = {}
    for key, value in details.items():
        if str(key).lower() in SENSITIVE_KEYS:
            clean[key] = REDACTED
        elif isinstance(value, dict):
            clean[key] = redact(value)
        else:
            clean[key] = value
    return clean


class JSONFormatter(logging.Formatter):
    """Renders a record as a single JSON line"""

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        details = getattr(record, "details", None)
        if details:
            entry["extra"] = redact(details)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Attach a single JSON handler to the service logger.

    Module loggers (``expense_tracker.auth`` and so on) propagate here.
    Calling this again replaces the handler rather than adding a second one.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Logger to configure
    """
    logger = logging.getLogger(logger_name)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, extra: Optional[dict] = None):
    """
    Log one service event with its structured fields.

    Args:
        logger: Logger to emit on
        level: Level name (info, warning, error, ...)
        message: Human-readable summary
        user_id: Id of the acting user, when known
        action: Event kind, e.g. ``login_failed`` or ``update_expense``
        resource: What was acted on, e.g. ``expense:<id>``
        extra: Additional fields; sensitive keys are redacted
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    fields = {"user_id": user_id, "action": action, "resource": resource, "details": extra}
    logger.log(levelno, message, extra={k: v for k, v in fields.items() if v})
