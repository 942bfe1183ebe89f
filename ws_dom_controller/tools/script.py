"""Arbitrary expression evaluation in the tab's isolated world."""

from __future__ import annotations

from typing import Any

from ..errors import InvalidArgument
from ..server.types import HandlerContext
from .js_helpers import EXEC_JS


def exec_js(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None) -> dict[str, Any]:
    """Handle `exec_js`: {js} -> {result}.

    The expression runs as `"use strict"; return (<js>)`. Values that do not
    survive a JSON round trip come back in their string form.
    """
    js = payload.get("js")
    if not isinstance(js, str) or not js.strip():
        raise InvalidArgument('exec_js: missing "js"')
    return ctx.actuator.run(tab_id, EXEC_JS, {"js": js})
