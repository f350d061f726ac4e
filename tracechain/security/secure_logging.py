"""
Secure Logging Utilities for TraceChain

Product names, locations, actors and free-text details all come straight from
callers. This module sanitizes such values before they reach a log line so
they cannot forge extra log records or inject terminal escapes, and emits the
ledger's audit trail as one JSON object per line.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any


# Characters that can be used for log injection
LOG_INJECTION_CHARS = {
    "\n": "\\n",
    "\r": "\\r",
    "\x00": "\\x00",
    "\x1b": "\\x1b",  # ANSI escape
    "\t": "\\t",
}

MAX_LOGGED_LENGTH = 200


def sanitize_for_log(value: Any) -> str:
    """
    Sanitize a value before logging to prevent log injection.

    Args:
        value: Value to sanitize (string, enum, dict, list, or other)

    Returns:
        Safe string representation
    """
    if value is None:
        return "null"

    if isinstance(value, (int, float, bool)):
        return str(value)

    if isinstance(value, str):
        result = value
        for char, replacement in LOG_INJECTION_CHARS.items():
            result = result.replace(char, replacement)
        if len(result) > MAX_LOGGED_LENGTH:
            result = result[:MAX_LOGGED_LENGTH] + "...[truncated]"
        return result

    if isinstance(value, dict):
        return json.dumps(
            {str(k): sanitize_for_log(v) for k, v in value.items()},
            ensure_ascii=True
        )

    if isinstance(value, (list, tuple)):
        return json.dumps([sanitize_for_log(item) for item in value], ensure_ascii=True)

    # Enums log by value
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return sanitize_for_log(value.value)

    return sanitize_for_log(str(value))


class SecureLogger:
    """
    Logger wrapper that sanitizes every field and writes structured JSON lines.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _format_structured(self, level: str, message: str, **kwargs: Any) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "message": sanitize_for_log(message),
        }
        if kwargs:
            log_entry["data"] = {k: sanitize_for_log(v) for k, v in kwargs.items()}
        return json.dumps(log_entry, ensure_ascii=True)

    def info(self, message: str, **kwargs: Any):
        self.logger.info(self._format_structured("INFO", message, **kwargs))

    def warning(self, message: str, **kwargs: Any):
        self.logger.warning(self._format_structured("WARNING", message, **kwargs))

    def audit(self, action: str, resource: str, entity_id: str | None = None,
              success: bool = True, **kwargs: Any):
        """
        Log an audit event for a ledger mutation or check.

        Args:
            action: Action performed (e.g., "create", "append", "verify")
            resource: Resource affected (e.g., "product", "event", "participant")
            entity_id: Identifier of the affected entity
            success: Whether the action was successful
            **kwargs: Additional context
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "type": "audit",
            "action": sanitize_for_log(action),
            "resource": sanitize_for_log(resource),
            "success": success,
            "logger": self.name,
        }
        if entity_id:
            log_entry["entity_id"] = sanitize_for_log(entity_id)
        if kwargs:
            log_entry["details"] = {k: sanitize_for_log(v) for k, v in kwargs.items()}

        level = logging.INFO if success else logging.WARNING
        self.logger.log(level, json.dumps(log_entry, ensure_ascii=True))


def get_api_logger() -> SecureLogger:
    """Get secure logger for the API layer."""
    return SecureLogger("tracechain.api")


def get_audit_logger() -> SecureLogger:
    """Get secure logger for ledger audit events."""
    return SecureLogger("tracechain.audit")
