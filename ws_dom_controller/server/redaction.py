"""Redaction for command logging.

Prefers safety over fidelity: sensitive-looking keys are masked, typed text and
script bodies are shortened, and URL credentials/secret query params removed.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SENSITIVE_SUBSTRINGS = (
    "token",
    "secret",
    "password",
    "passwd",
    "pwd",
    "authorization",
    "cookie",
    "session",
    "jwt",
    "bearer",
    "api-key",
    "api_key",
    "apikey",
)

# Free-form content fields: logged only as a short prefix.
_CONTENT_KEYS = {"text", "value", "js"}

_MAX_LOGGED_CHARS = 80


def is_sensitive_key(key: str) -> bool:
    k = (key or "").strip().lower()
    if not k:
        return False
    if k == "auth":
        return True
    return any(s in k for s in _SENSITIVE_SUBSTRINGS)


def redact_url(url: str) -> str:
    """Drop userinfo and mask sensitive query values; other URLs pass unchanged."""
    if not isinstance(url, str) or not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.netloc.rsplit("@", 1)[-1] if "@" in parts.netloc else parts.netloc
    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        if any(is_sensitive_key(k) for k, _ in pairs):
            query = urlencode([(k, "<redacted>" if is_sensitive_key(k) else v) for k, v in pairs])
    if netloc == parts.netloc and query == parts.query:
        return url
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def _shorten(value: str) -> str:
    if len(value) <= _MAX_LOGGED_CHARS:
        return value
    return f"{value[:_MAX_LOGGED_CHARS]}…(+{len(value) - _MAX_LOGGED_CHARS})"


def redact_payload(payload: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    # Typing into e.g. input[type=password] must not leak the value.
    secret_target = any(is_sensitive_key(str(payload.get(k) or "")) for k in ("selector", "expr", "attr"))
    for key, value in payload.items():
        if is_sensitive_key(str(key)) or (secret_target and key in ("text", "value")):
            out[key] = "<redacted>"
        elif key == "url" and isinstance(value, str):
            out[key] = redact_url(value)
        elif isinstance(value, str) and (key in _CONTENT_KEYS or len(value) > _MAX_LOGGED_CHARS):
            out[key] = _shorten(value)
        else:
            out[key] = value
    return out
