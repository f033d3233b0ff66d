"""Redaction helpers for safe logging. Client data must pass through these."""

import re
from typing import Any

# Patterns that should never appear in logs
_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
_PASSPORT_PATTERN = re.compile(r"\b[A-Za-z]{0,3}\d{6,10}\b")

# Fields whose value is always hidden, whatever it looks like
SENSITIVE_FIELDS = frozenset({"passport_number", "phone"})

_REDACTED = "[REDACTED]"


def redact_string(value: str) -> str:
    """Redact phone and passport patterns from a string."""
    result = _PHONE_PATTERN.sub(_REDACTED, value)
    result = _PASSPORT_PATTERN.sub(_REDACTED, result)
    return result


def redact_value(value: Any) -> str:
    """Redact any value for safe logging. Returns string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        # For dicts, only log keys (structure), never values
        return f"dict(keys={list(value.keys())})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    # For any other type, only log type name
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a context dict safe for logging. All values are redacted."""
    return {
        k: _REDACTED if k in SENSITIVE_FIELDS and v is not None else redact_value(v)
        for k, v in kwargs.items()
    }
