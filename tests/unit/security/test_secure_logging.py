"""
Tests for log sanitization and the structured audit trail
"""

import json
import logging

from tracechain.core.models import EventType
from tracechain.security.secure_logging import (
    MAX_LOGGED_LENGTH, SecureLogger, get_audit_logger, sanitize_for_log
)


def test_sanitize_escapes_line_breaks():
    forged = "Farm Co\n2024-01-01 - tracechain.audit - INFO - forged"
    sanitized = sanitize_for_log(forged)

    assert "\n" not in sanitized
    assert "\\n" in sanitized


def test_sanitize_strips_terminal_escapes():
    assert sanitize_for_log("\x1b[31mred") == "\\x1b[31mred"


def test_sanitize_truncates_long_values():
    sanitized = sanitize_for_log("x" * (MAX_LOGGED_LENGTH * 2))
    assert sanitized.endswith("...[truncated]")
    assert len(sanitized) == MAX_LOGGED_LENGTH + len("...[truncated]")


def test_sanitize_scalars_and_containers():
    assert sanitize_for_log(None) == "null"
    assert sanitize_for_log(42) == "42"
    assert sanitize_for_log(EventType.SHIPPING) == "Shipping"
    assert json.loads(sanitize_for_log(["a\nb", 1])) == ["a\\nb", "1"]
    assert json.loads(sanitize_for_log({"k": "v\r"})) == {"k": "v\\r"}


def test_structured_info_line(caplog):
    caplog.set_level(logging.INFO, logger="tracechain.test")
    SecureLogger("tracechain.test").info("hello", actor="Carrier\nX")

    entry = json.loads(caplog.records[-1].getMessage())
    assert entry["level"] == "INFO"
    assert entry["logger"] == "tracechain.test"
    assert entry["data"] == {"actor": "Carrier\\nX"}


def test_audit_entry(caplog):
    caplog.set_level(logging.INFO, logger="tracechain.audit")
    get_audit_logger().audit("create", "product", entity_id="1700000000_abc", name="Milk")

    entry = json.loads(caplog.records[-1].getMessage())
    assert entry["type"] == "audit"
    assert entry["action"] == "create"
    assert entry["resource"] == "product"
    assert entry["entity_id"] == "1700000000_abc"
    assert entry["success"] is True
    assert entry["details"] == {"name": "Milk"}


def test_failed_audit_logged_as_warning(caplog):
    caplog.set_level(logging.INFO, logger="tracechain.audit")
    get_audit_logger().audit("append", "event", success=False)

    assert caplog.records[-1].levelno == logging.WARNING


def test_ledger_emits_audit_trail(caplog, ledger):
    caplog.set_level(logging.INFO, logger="tracechain.audit")
    product_id = ledger.create_product("Milk", "", "Farm Co", "B-1")

    actions = [json.loads(record.getMessage()) for record in caplog.records
               if record.name == "tracechain.audit"]
    assert {"action": "create", "entity_id": product_id}.items() <= actions[-1].items()
