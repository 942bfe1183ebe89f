from __future__ import annotations

import pytest

from ws_dom_controller.errors import HostError, InvalidArgument, NavigationTimeout
from ws_dom_controller.server.types import HandlerContext
from ws_dom_controller.tabs import TabResolver
from ws_dom_controller.tools.base import PageActuator
from ws_dom_controller.tools.navigation import navigate, wait_for_tab_load

from .fakes import FakeTabHost


def test_nav_reuses_remembered_tab(ctx, host) -> None:
    tab = host.add_tab("https://old.example", active=True)
    ctx.resolver.remember(tab)

    out = navigate(ctx, {"url": "https://example.org"})

    assert out == {"tabId": tab, "url": "https://example.org", "ok": True}
    assert ("update_tab", (tab, "https://example.org")) in host.calls
    assert "create_tab" not in host.call_names()


def test_nav_without_reuse_opens_new_tab_and_remembers_it(ctx, host) -> None:
    old = host.add_tab("https://old.example", active=True)
    ctx.resolver.remember(old)

    out = navigate(ctx, {"url": "https://example.org", "reuse": False})

    assert out["tabId"] != old
    assert host.tabs[out["tabId"]].url == "https://example.org"
    assert ctx.resolver.remembered() == out["tabId"]


def test_nav_honours_explicit_tab_id(ctx, host) -> None:
    first = host.add_tab("https://a.example", active=True)
    second = host.add_tab("https://b.example")

    out = navigate(ctx, {"url": "https://example.org", "tabId": second})

    assert out["tabId"] == second
    assert first != second
    assert ctx.resolver.remembered() == second


def test_nav_without_url_reports_current_url(ctx, host) -> None:
    out = navigate(ctx, {})
    assert out["url"] == "about:blank"
    assert out["ok"] is True


def test_nav_times_out_when_tab_never_completes(ctx, host) -> None:
    host.status = "loading"
    with pytest.raises(NavigationTimeout) as excinfo:
        navigate(ctx, {"url": "https://slow.example", "timeout_ms": 0})
    assert str(excinfo.value) == "Timeout waiting for tab to load"
    # The tab is remembered even though the load wait failed.
    assert ctx.resolver.remembered() is not None


def test_nav_rejects_bad_timeout(ctx) -> None:
    with pytest.raises(InvalidArgument):
        navigate(ctx, {"url": "https://example.org", "timeout_ms": "soon"})


def test_wait_for_tab_load_tolerates_transient_host_errors() -> None:
    states = iter([HostError("gone"), "loading", "complete"])

    class FlakyHost:
        def tab_status(self, tab_id: int) -> str:
            state = next(states)
            if isinstance(state, Exception):
                raise state
            return state

    wait_for_tab_load(FlakyHost(), 1, timeout=2.0, interval=0.01)


class FreshTabHost(FakeTabHost):
    """New tabs report their initial blank document complete until navigated."""

    def __init__(self) -> None:
        super().__init__()
        self.pending_loads: dict[int, int] = {}

    def update_tab(self, tab_id: int, *, url: str, active: bool = True) -> None:
        super().update_tab(tab_id, url=url, active=active)
        self.pending_loads[tab_id] = 2

    def tab_status(self, tab_id: int) -> str:
        self.calls.append(("tab_status", tab_id))
        left = self.pending_loads.get(tab_id, 0)
        if left:
            self.pending_loads[tab_id] = left - 1
            return "loading"
        return "complete"


def test_nav_new_tab_waits_for_the_navigated_document(config) -> None:
    host = FreshTabHost()
    ctx = HandlerContext(config=config, host=host, resolver=TabResolver(host), actuator=PageActuator(host))

    out = navigate(ctx, {"url": "https://example.org", "reuse": False})

    tab = out["tabId"]
    names = host.call_names()
    assert ("create_tab", "about:blank") in host.calls
    assert ("update_tab", (tab, "https://example.org")) in host.calls
    assert names.index("update_tab") < names.index("tab_status")
    # Two "loading" answers, then "complete" for the real page.
    assert names.count("tab_status") == 3
    assert host.tabs[tab].url == "https://example.org"


def test_nav_rejects_string_reuse_flag(ctx, host) -> None:
    with pytest.raises(InvalidArgument, match='nav: "reuse" must be a boolean'):
        navigate(ctx, {"url": "https://example.org", "reuse": "false"})
    assert host.calls == []
