"""
CSS selector commands: click, type, set, exists, get_html.

Each handler validates its payload, then runs one snippet from js_helpers in
the resolved tab. Element waits happen in-page, sampled every 100ms.
"""

from __future__ import annotations

from typing import Any

from ..errors import InvalidArgument
from ..polling import ELEMENT_POLL_INTERVAL_MS
from ..server.types import HandlerContext
from .base import DEFAULT_MAX_LEN, optional_str, read_bool, read_int, require_str, truncate_html
from .input import TYPING_DELAY_MS, click_plan, typing_plan
from .js_helpers import CLICK_JS, EXISTS_JS, GET_HTML_JS, SET_JS, TYPE_JS

DEFAULT_ELEMENT_TIMEOUT_MS = 2000


def click(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    selector = require_str(payload, "selector", cmd="click")
    index = read_int(payload, "index", 0, cmd="click")
    timeout_ms = read_int(payload, "timeout_ms", DEFAULT_ELEMENT_TIMEOUT_MS, cmd="click")
    args = {
        "selector": selector,
        "index": index,
        "timeoutMs": timeout_ms,
        "intervalMs": ELEMENT_POLL_INTERVAL_MS,
        "plan": click_plan(),
    }
    return ctx.actuator.run(tab_id, CLICK_JS, args, wait_ms=timeout_ms)


def type_text(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    selector = require_str(payload, "selector", cmd="type")
    text = payload.get("text")
    if not isinstance(text, str):
        raise InvalidArgument('type: missing "text"')
    index = read_int(payload, "index", 0, cmd="type")
    timeout_ms = read_int(payload, "timeout_ms", DEFAULT_ELEMENT_TIMEOUT_MS, cmd="type")
    args = {
        "selector": selector,
        "index": index,
        "timeoutMs": timeout_ms,
        "intervalMs": ELEMENT_POLL_INTERVAL_MS,
        "text": text,
        "plan": typing_plan(
            clear=read_bool(payload, "clear", True, cmd="type"),
            enter=read_bool(payload, "enter", False, cmd="type"),
        ),
    }
    # Typing is paced per character, so the relay budget grows with the text.
    return ctx.actuator.run(tab_id, TYPE_JS, args, wait_ms=timeout_ms + len(text) * TYPING_DELAY_MS * 4)


def set_value(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    selector = require_str(payload, "selector", cmd="set")
    if "value" not in payload:
        raise InvalidArgument('set: missing "value"')
    value = payload.get("value")
    args = {
        "selector": selector,
        "index": read_int(payload, "index", 0, cmd="set"),
        "value": "" if value is None else str(value),
        "attr": optional_str(payload, "attr", cmd="set"),
    }
    return ctx.actuator.run(tab_id, SET_JS, args)


def exists(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    args = {
        "selector": require_str(payload, "selector", cmd="exists"),
        "index": read_int(payload, "index", 0, cmd="exists"),
    }
    return ctx.actuator.run(tab_id, EXISTS_JS, args)


def get_html(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    selector = optional_str(payload, "selector", cmd="get_html")
    max_len = read_int(payload, "max_len", DEFAULT_MAX_LEN, cmd="get_html")
    found = ctx.actuator.run(tab_id, GET_HTML_JS, {"selector": selector}) or {}
    return truncate_html(str(found.get("html") or ""), max_len)
