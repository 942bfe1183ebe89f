"""Host runtime contract and its Chrome DevTools Protocol implementation.

The bridge never talks to the browser directly: handlers and the tab resolver
go through a `TabHost`. `CdpTabHost` maps CDP page targets onto session-scoped
integer tab ids and injects scripts into an isolated world of the tab.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from .config import BridgeConfig
from .errors import HostError
from .session_cdp import CdpConnection, http_get_json

if TYPE_CHECKING:
    from .launcher import BrowserLauncher

logger = logging.getLogger("ws_dom.host")

ISOLATED_WORLD_NAME = "ws_dom_controller"


@dataclass(frozen=True, slots=True)
class TabInfo:
    id: int
    url: str = ""
    title: str = ""
    discarded: bool = False


class TabHost(Protocol):
    def get_tab(self, tab_id: int) -> TabInfo:
        """Return the tab or raise HostError if it no longer exists."""
        ...

    def query_active_tab(self) -> TabInfo | None: ...

    def create_tab(self, url: str = "about:blank", *, active: bool = True) -> TabInfo: ...

    def update_tab(self, tab_id: int, *, url: str, active: bool = True) -> None: ...

    def tab_status(self, tab_id: int) -> str:
        """Return the tab's document readiness ("loading", "interactive", "complete")."""
        ...

    def run_in_page(self, tab_id: int, source: str, args: list[Any], *, timeout: float) -> Any:
        """Call the function `source` with `args` inside the tab and return its JSON value."""
        ...


def build_invocation(source: str, args: list[Any]) -> str:
    """Render a function source plus JSON arguments into an evaluable expression."""
    rendered = ", ".join(json.dumps(arg, ensure_ascii=False) for arg in args)
    return f"({source})({rendered})"


def unwrap_remote_value(value: Any) -> Any:
    # CDP reports undefined/null as type descriptors without a "value" field.
    if not isinstance(value, dict):
        return value
    if value.get("type") == "undefined":
        return None
    if value.get("type") == "object" and value.get("subtype") == "null":
        return None
    return value.get("value")


class CdpTabHost:
    """TabHost backed by a Chromium remote debugging endpoint."""

    def __init__(self, config: BridgeConfig, launcher: BrowserLauncher | None = None) -> None:
        self.config = config
        self.launcher = launcher
        self._lock = threading.Lock()
        self._ids: dict[str, int] = {}
        self._targets: dict[int, str] = {}
        self._next_id = 1

    # ─────────────────────────────────────────────────────────────────────────
    # Target bookkeeping
    # ─────────────────────────────────────────────────────────────────────────

    def _tab_id_for(self, target_id: str) -> int:
        with self._lock:
            tab_id = self._ids.get(target_id)
            if tab_id is None:
                tab_id = self._next_id
                self._next_id += 1
                self._ids[target_id] = tab_id
                self._targets[tab_id] = target_id
            return tab_id

    def _target_for(self, tab_id: int) -> str:
        with self._lock:
            target_id = self._targets.get(int(tab_id))
        if target_id is None:
            raise HostError(f"No tab with id: {tab_id}")
        return target_id

    def _list_page_targets(self) -> list[dict[str, Any]]:
        url = f"{self.config.cdp_http_base}/json/list"
        try:
            targets = http_get_json(url)
        except HostError:
            if self.launcher is None:
                raise
            res = self.launcher.ensure_running()
            logger.info("browser_ensure_running: %s", res.message)
            targets = http_get_json(url)
        if not isinstance(targets, list):
            return []
        return [t for t in targets if isinstance(t, dict) and t.get("type") == "page"]

    def _find_target(self, tab_id: int) -> dict[str, Any]:
        target_id = self._target_for(tab_id)
        for target in self._list_page_targets():
            if target.get("id") == target_id:
                return target
        raise HostError(f"No tab with id: {tab_id}")

    def _to_info(self, target: dict[str, Any]) -> TabInfo:
        return TabInfo(
            id=self._tab_id_for(str(target.get("id"))),
            url=str(target.get("url") or ""),
            title=str(target.get("title") or ""),
        )

    def _browser_ws_url(self) -> str:
        version = http_get_json(f"{self.config.cdp_http_base}/json/version")
        ws_url = version.get("webSocketDebuggerUrl") if isinstance(version, dict) else None
        if not ws_url:
            raise HostError("CDP browser WebSocket URL not found")
        return str(ws_url)

    @contextmanager
    def _browser_connection(self) -> Generator[CdpConnection, None, None]:
        conn = CdpConnection(self._browser_ws_url(), timeout=self.config.cdp_timeout)
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _page_connection(self, tab_id: int, timeout: float | None = None) -> Generator[CdpConnection, None, None]:
        target = self._find_target(tab_id)
        ws_url = target.get("webSocketDebuggerUrl")
        if not ws_url:
            raise HostError(f"Tab {tab_id} is not debuggable (already attached elsewhere?)")
        conn = CdpConnection(str(ws_url), timeout=float(timeout or self.config.cdp_timeout))
        try:
            yield conn
        finally:
            conn.close()

    # ─────────────────────────────────────────────────────────────────────────
    # TabHost
    # ─────────────────────────────────────────────────────────────────────────

    def get_tab(self, tab_id: int) -> TabInfo:
        return self._to_info(self._find_target(tab_id))

    def query_active_tab(self) -> TabInfo | None:
        # /json/list is ordered by most recent activation.
        for target in self._list_page_targets():
            url = str(target.get("url") or "")
            if url.startswith("devtools://"):
                continue
            return self._to_info(target)
        return None

    def create_tab(self, url: str = "about:blank", *, active: bool = True) -> TabInfo:
        with self._browser_connection() as conn:
            result = conn.send("Target.createTarget", {"url": url, "background": not active})
        target_id = result.get("targetId")
        if not target_id:
            raise HostError("Failed to create browser tab")
        return TabInfo(id=self._tab_id_for(str(target_id)), url=url)

    def update_tab(self, tab_id: int, *, url: str, active: bool = True) -> None:
        target_id = self._target_for(tab_id)
        with self._page_connection(tab_id) as conn:
            result = conn.send("Page.navigate", {"url": url})
        error_text = result.get("errorText")
        if error_text:
            raise HostError(f"Navigation to {url} failed: {error_text}")
        if active:
            with self._browser_connection() as conn:
                conn.send("Target.activateTarget", {"targetId": target_id})

    def tab_status(self, tab_id: int) -> str:
        with self._page_connection(tab_id) as conn:
            result = conn.send("Runtime.evaluate", {"expression": "document.readyState", "returnByValue": True})
        return str(unwrap_remote_value(result.get("result")) or "")

    def _isolated_context(self, conn: CdpConnection) -> int:
        tree = conn.send("Page.getFrameTree")
        frame_id = ((tree.get("frameTree") or {}).get("frame") or {}).get("id")
        if not frame_id:
            raise HostError("Unable to resolve the tab's main frame")
        world = conn.send(
            "Page.createIsolatedWorld",
            {"frameId": frame_id, "worldName": ISOLATED_WORLD_NAME, "grantUniveralAccess": True},
        )
        context_id = world.get("executionContextId")
        if not isinstance(context_id, int):
            raise HostError("Unable to create an isolated execution context")
        return context_id

    def run_in_page(self, tab_id: int, source: str, args: list[Any], *, timeout: float) -> Any:
        with self._page_connection(tab_id, timeout=timeout) as conn:
            context_id = self._isolated_context(conn)
            result = conn.send(
                "Runtime.evaluate",
                {
                    "expression": build_invocation(source, args),
                    "contextId": context_id,
                    "awaitPromise": True,
                    "returnByValue": True,
                },
            )
        details = result.get("exceptionDetails")
        if isinstance(details, dict):
            exc = details.get("exception") or {}
            message = exc.get("description") if isinstance(exc, dict) else None
            raise HostError(str(message or details.get("text") or "Script injection failed"))
        return unwrap_remote_value(result.get("result"))
