"""
Base utilities for page-level commands.

Provides:
- PageActuator: runs a snippet inside a tab and maps page failures to errors
- Payload readers that raise InvalidArgument on bad input
- HTML truncation shared by get_html and xpath getHTML
"""

from __future__ import annotations

from typing import Any

from ..errors import HostError, InvalidArgument, error_from_page
from ..tab_host import TabHost
from .js_helpers import PAGE_WRAPPER, PRELUDE

DEFAULT_MAX_LEN = 500_000

# Extra seconds granted to the relay on top of any in-page wait.
SCRIPT_TIMEOUT_SLACK = 10.0


def wrap_page_function(body: str) -> str:
    return PAGE_WRAPPER.replace("__PRELUDE__", PRELUDE).replace("__BODY__", body.strip())


class PageActuator:
    """Runs DOM snippets in a tab's isolated world."""

    def __init__(self, host: TabHost, *, slack: float = SCRIPT_TIMEOUT_SLACK) -> None:
        self._host = host
        self._slack = float(slack)

    def run(self, tab_id: int, body: str, args: dict[str, Any], *, wait_ms: float = 0) -> Any:
        timeout = self._slack + max(0.0, float(wait_ms)) / 1000.0
        raw = self._host.run_in_page(tab_id, wrap_page_function(body), [args], timeout=timeout)
        if not isinstance(raw, dict) or "ok" not in raw:
            raise HostError(f"Malformed result from tab {tab_id}")
        if raw.get("ok"):
            return raw.get("value")
        raise error_from_page(raw.get("kind"), raw.get("message"))


# Payload readers
def require_str(payload: dict[str, Any], key: str, *, cmd: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f'{cmd}: missing "{key}"')
    return value


def optional_str(payload: dict[str, Any], key: str, *, cmd: str) -> str | None:
    value = payload.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f'{cmd}: "{key}" must be a string')
    return value


def read_int(payload: dict[str, Any], key: str, default: int, *, cmd: str, minimum: int = 0) -> int:
    value = payload.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f'{cmd}: "{key}" must be a number')
    if isinstance(value, float) and not value.is_integer():
        raise InvalidArgument(f'{cmd}: "{key}" must be an integer')
    out = int(value)
    if out < minimum:
        raise InvalidArgument(f'{cmd}: "{key}" must be >= {minimum}')
    return out


def read_bool(payload: dict[str, Any], key: str, default: bool, *, cmd: str) -> bool:
    value = payload.get(key, default)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidArgument(f'{cmd}: "{key}" must be a boolean')
    return value


def truncate_html(html: str, max_len: int) -> dict[str, Any]:
    """Return `{html, truncated, length}` with `length` the untruncated size."""
    html = html or ""
    truncated = len(html) > max_len
    return {"html": html[:max_len] if truncated else html, "truncated": truncated, "length": len(html)}
