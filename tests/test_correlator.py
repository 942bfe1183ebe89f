from __future__ import annotations

import json

from ws_dom_controller.server.correlator import Correlator
from ws_dom_controller.server.dispatch import HandlerRegistry
from ws_dom_controller.server.registry import create_default_registry


def _correlator(ctx) -> Correlator:
    return Correlator(create_default_registry(), ctx)


def test_default_registry_commands() -> None:
    registry = create_default_registry()
    assert set(registry.command_names) == {"nav", "click", "type", "set", "exists", "get_html", "exec_js", "xpath"}
    assert registry.get("nav")[1] is False
    assert registry.get("click")[1] is True


def test_ping_short_circuits(ctx, host) -> None:
    out = _correlator(ctx).handle_raw(json.dumps({"id": "p", "cmd": "ping"}))
    assert out == {"id": "p", "ok": True, "result": "pong"}
    assert host.calls == []


def test_invalid_json_gets_null_id(ctx) -> None:
    out = _correlator(ctx).handle_raw("{{{")
    assert out == {"id": None, "ok": False, "error": "Invalid JSON received"}


def test_unknown_command(ctx) -> None:
    out = _correlator(ctx).handle_raw(json.dumps({"id": "9", "cmd": "fly"}))
    assert out == {"id": "9", "ok": False, "error": "Unknown cmd: fly"}


def test_nav_scenario(ctx, host) -> None:
    out = _correlator(ctx).handle_raw('{"id":"1","cmd":"nav","url":"https://example.org"}')
    assert out["id"] == "1"
    assert out["ok"] is True
    result = out["result"]
    assert isinstance(result["tabId"], int)
    assert result == {"tabId": result["tabId"], "url": "https://example.org", "ok": True}
    assert host.tabs[result["tabId"]].url == "https://example.org"


def test_missing_element_scenario(ctx, host) -> None:
    host.add_tab("https://example.org", active=True)
    host.responses.append({"ok": False, "kind": "ElementNotFound", "message": "Element not found: #missing[0]"})

    out = _correlator(ctx).handle_raw('{"id":"2","cmd":"click","selector":"#missing","timeout_ms":100}')

    assert out == {"id": "2", "ok": False, "error": "Element not found: #missing[0]"}
    assert host.scripts[0]["args"]["timeoutMs"] == 100


def test_tab_id_is_merged_into_results(ctx, host) -> None:
    tab = host.add_tab("https://example.org", active=True)
    host.responses.append({"ok": True, "value": {"exists": True}})

    out = _correlator(ctx).handle({"id": "3", "cmd": "exists", "selector": "h1"})

    assert out == {"id": "3", "ok": True, "result": {"tabId": tab, "exists": True}}


def test_later_commands_follow_nav_tab(ctx, host) -> None:
    host.add_tab("https://other.example", active=True)
    correlator = _correlator(ctx)
    nav = correlator.handle({"id": "1", "cmd": "nav", "url": "https://example.org", "reuse": False})
    host.responses.append({"ok": True, "value": {"exists": False}})

    out = correlator.handle({"id": "2", "cmd": "exists", "selector": "h1"})

    assert out["result"]["tabId"] == nav["result"]["tabId"]
    assert host.scripts[-1]["tabId"] == nav["result"]["tabId"]


def test_unexpected_exception_becomes_error_envelope(ctx) -> None:
    def _boom(ctx, payload, tab_id):
        raise RuntimeError("kaput")

    registry = HandlerRegistry()
    registry.register("boom", _boom, needs_tab=False)
    out = Correlator(registry, ctx).handle({"id": "x", "cmd": "boom"})
    assert out == {"id": "x", "ok": False, "error": "kaput"}


def test_non_object_envelope_gets_generated_id(ctx) -> None:
    out = _correlator(ctx).handle_raw("[1, 2]")
    assert out["ok"] is False
    assert out["error"] == "Envelope must be a JSON object"
    assert isinstance(out["id"], str) and out["id"]


def test_missing_cmd(ctx) -> None:
    out = _correlator(ctx).handle({"id": "4"})
    assert out == {"id": "4", "ok": False, "error": "Unknown cmd: None"}
