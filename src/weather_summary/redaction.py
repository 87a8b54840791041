"""Helpers for redacting API keys from log lines and error messages."""

from __future__ import annotations

import re

REDACTED = "[REDACTED]"

# Stops at '&' so only the value of a query parameter is replaced.
_API_KEY_VALUE_RE = re.compile(
    r"""(?ix)
    \b
    (
      appid|
      api[_-]?key
    )
    \s*[:=]\s*
    ([^\s,;&"']+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact API key values embedded in plain text."""
    return _API_KEY_VALUE_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
