"""
Navigation command.

Provides:
- navigate: point a reused (or fresh) tab at a URL and wait for it to load
- wait_for_tab_load: bounded readiness poll
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import HostError, NavigationTimeout
from ..polling import TAB_LOAD_POLL_INTERVAL, poll_until
from ..server.types import HandlerContext
from ..tab_host import TabHost
from .base import optional_str, read_bool, read_int

logger = logging.getLogger("ws_dom.navigation")

BLANK_URL = "about:blank"


def wait_for_tab_load(
    host: TabHost,
    tab_id: int,
    *,
    timeout: float = 30.0,
    interval: float = TAB_LOAD_POLL_INTERVAL,
) -> None:
    """Block until the tab's document is complete; raise NavigationTimeout otherwise."""

    def _loaded() -> bool:
        try:
            return host.tab_status(tab_id) == "complete"
        except HostError:
            # The target is often briefly unreachable while a navigation commits.
            return False

    if not poll_until(_loaded, timeout=timeout, interval=interval):
        raise NavigationTimeout("Timeout waiting for tab to load")


def navigate(ctx: HandlerContext, payload: dict[str, Any], tab_id: int | None = None) -> dict[str, Any]:
    """Handle `nav`: {url?, reuse=true, tabId?, timeout_ms?} -> {tabId, url, ok}."""
    url = optional_str(payload, "url", cmd="nav")
    reuse = read_bool(payload, "reuse", True, cmd="nav")
    default_ms = int(ctx.config.nav_timeout * 1000)
    timeout_ms = read_int(payload, "timeout_ms", default_ms, cmd="nav")
    target_url = url or BLANK_URL

    if reuse:
        target = ctx.resolver.resolve(payload.get("tabId"))
    else:
        # A fresh tab reports its initial blank document as "complete", so it is
        # opened blank and then navigated like a reused one.
        target = ctx.host.create_tab(BLANK_URL, active=True).id
    ctx.host.update_tab(target, url=target_url, active=True)
    ctx.resolver.remember(target)
    logger.info("nav tab=%s reuse=%s", target, reuse)
    wait_for_tab_load(ctx.host, target, timeout=timeout_ms / 1000.0)

    if url:
        return {"tabId": target, "url": url, "ok": True}
    try:
        current = ctx.host.get_tab(target).url
    except HostError:
        current = ""
    return {"tabId": target, "url": current or BLANK_URL, "ok": True}
