from __future__ import annotations

from typing import Any

from ws_dom_controller.errors import HostError
from ws_dom_controller.tab_host import TabInfo


class FakeTabHost:
    """In-memory TabHost. Page scripts answer from `responses` (FIFO) or `respond`."""

    def __init__(self) -> None:
        self.tabs: dict[int, TabInfo] = {}
        self.active: int | None = None
        self.next_id = 100
        self.status = "complete"
        self.calls: list[tuple[str, Any]] = []
        self.scripts: list[dict[str, Any]] = []
        self.responses: list[Any] = []
        self.respond = None
        self.fail_create = False
        self.fail_query = False

    def add_tab(self, url: str = "about:blank", *, discarded: bool = False, active: bool = False) -> int:
        tab_id = self.next_id
        self.next_id += 1
        self.tabs[tab_id] = TabInfo(id=tab_id, url=url, discarded=discarded)
        if active:
            self.active = tab_id
        return tab_id

    def get_tab(self, tab_id: int) -> TabInfo:
        self.calls.append(("get_tab", tab_id))
        tab = self.tabs.get(tab_id)
        if tab is None:
            raise HostError(f"No tab with id: {tab_id}")
        return tab

    def query_active_tab(self) -> TabInfo | None:
        self.calls.append(("query_active_tab", None))
        if self.fail_query:
            raise HostError("CDP endpoint not reachable")
        return self.tabs.get(self.active) if self.active is not None else None

    def create_tab(self, url: str = "about:blank", *, active: bool = True) -> TabInfo:
        self.calls.append(("create_tab", url))
        if self.fail_create:
            raise HostError("Failed to create browser tab")
        tab_id = self.add_tab(url, active=active)
        return self.tabs[tab_id]

    def update_tab(self, tab_id: int, *, url: str, active: bool = True) -> None:
        self.calls.append(("update_tab", (tab_id, url)))
        if tab_id not in self.tabs:
            raise HostError(f"No tab with id: {tab_id}")
        self.tabs[tab_id] = TabInfo(id=tab_id, url=url)
        if active:
            self.active = tab_id

    def tab_status(self, tab_id: int) -> str:
        self.calls.append(("tab_status", tab_id))
        return self.status

    def run_in_page(self, tab_id: int, source: str, args: list[Any], *, timeout: float) -> Any:
        self.scripts.append({"tabId": tab_id, "source": source, "args": args[0], "timeout": timeout})
        if self.responses:
            return self.responses.pop(0)
        if self.respond is not None:
            return self.respond(source, args[0])
        return {"ok": True, "value": {}}

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]
