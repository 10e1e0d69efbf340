"""
peridio_sdk.tier0_core.redact
──────────────────────────────
Secret redaction for log records. The API key travels in the
``Authorization: Token <key>`` header; nothing derived from it may reach a
log sink.
"""
from __future__ import annotations

import re
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({
    "api_key", "apikey", "token", "secret", "password",
    "authorization", "private_key", "signature", "certificate",
})

_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Token\s+[A-Za-z0-9\-._~+/]+=*"), "Token [REDACTED]"),
    (re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", re.I), "Bearer [REDACTED]"),
    (re.compile(r"(api[_-]?key|token)=[^\s&\"']+", re.I), r"\1=[REDACTED]"),
]

REDACTED = "[REDACTED]"


def redact_dict(
    data: dict[str, Any],
    sensitive_keys: frozenset[str] | None = None,
) -> dict[str, Any]:
    """
    Return a copy of *data* with sensitive values replaced by REDACTED.
    Nested dicts are redacted recursively; strings are scrubbed.
    """
    keys = sensitive_keys if sensitive_keys is not None else _SENSITIVE_KEYS
    result: dict[str, Any] = {}
    for k, v in data.items():
        if k.lower() in keys:
            result[k] = REDACTED
        elif isinstance(v, dict):
            result[k] = redact_dict(v, keys)
        elif isinstance(v, str):
            result[k] = scrub_string(v)
        else:
            result[k] = v
    return result


def scrub_string(text: str) -> str:
    """Apply regex-based scrubbing to an arbitrary string."""
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def structlog_redact_processor(
    logger: Any,
    method: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor; must run before the renderer."""
    return redact_dict(event_dict)


__all__ = ["REDACTED", "redact_dict", "scrub_string", "structlog_redact_processor"]
