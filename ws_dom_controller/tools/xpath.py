"""
XPath lookup and actions.

Index-targeting actions wait for the snapshot to grow past `index`; list,
exists and count evaluate once.
"""

from __future__ import annotations

from typing import Any

from ..errors import InvalidArgument, UnknownAction
from ..polling import ELEMENT_POLL_INTERVAL_MS
from ..server.types import HandlerContext
from .base import DEFAULT_MAX_LEN, read_bool, read_int, truncate_html
from .input import TYPING_DELAY_MS, click_plan, typing_plan
from .js_helpers import XPATH_JS

IMMEDIATE_ACTIONS = frozenset({"list", "exists", "count"})
INDEXED_ACTIONS = frozenset({"click", "getAttribute", "getHTML", "getText", "setValue", "type"})
ACTIONS = IMMEDIATE_ACTIONS | INDEXED_ACTIONS

DEFAULT_LIST_MAX = 10


def xpath(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    expr = payload.get("expr")
    if not expr or not isinstance(expr, str):
        raise InvalidArgument('xpath: missing "expr"')

    action = payload.get("action") or "list"
    if action not in ACTIONS:
        raise UnknownAction(f"Unknown xpath action: {action}")

    attr = payload.get("attr")
    if action == "getAttribute" and (not attr or not isinstance(attr, str)):
        raise InvalidArgument('getAttribute requires "attr"')

    text = payload.get("text", "")
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise InvalidArgument('xpath: "text" must be a string')

    index = read_int(payload, "index", 0, cmd="xpath")
    timeout_ms = read_int(payload, "timeout_ms", 2000, cmd="xpath")
    max_len = read_int(payload, "max_len", DEFAULT_MAX_LEN, cmd="xpath")
    args = {
        "expr": expr,
        "action": action,
        "index": index,
        "timeoutMs": timeout_ms if action in INDEXED_ACTIONS else 0,
        "intervalMs": ELEMENT_POLL_INTERVAL_MS,
        "attr": attr,
        "text": text,
        "max": read_int(payload, "max", DEFAULT_LIST_MAX, cmd="xpath", minimum=-(2**31)),
        "includeHTML": read_bool(payload, "includeHTML", False, cmd="xpath"),
        "maxLen": max_len,
        "click": click_plan(),
        "typing": typing_plan(
            clear=read_bool(payload, "clear", True, cmd="xpath"),
            enter=read_bool(payload, "enter", False, cmd="xpath"),
        ),
    }

    wait_ms = args["timeoutMs"]
    if action == "type":
        wait_ms += len(text) * TYPING_DELAY_MS * 4
    result = ctx.actuator.run(tab_id, XPATH_JS, args, wait_ms=wait_ms) or {}

    if action == "getHTML":
        return truncate_html(str(result.get("html") or ""), max_len)
    return result
