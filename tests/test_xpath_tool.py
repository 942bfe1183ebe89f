from __future__ import annotations

import pytest

from ws_dom_controller.errors import InvalidArgument, InvalidXPath, NoNodeAtIndex, UnknownAction
from ws_dom_controller.tools import xpath


def test_xpath_defaults_to_list(ctx, host) -> None:
    host.responses.append({"ok": True, "value": {"count": 0, "items": []}})

    xpath(ctx, {"expr": "//a"}, 1)

    args = host.scripts[0]["args"]
    assert args["action"] == "list"
    assert args["max"] == 10
    assert args["includeHTML"] is False


def test_count_and_exists_do_not_wait(ctx, host) -> None:
    host.responses.append({"ok": True, "value": {"count": 2}})
    host.responses.append({"ok": True, "value": {"exists": True}})

    assert xpath(ctx, {"expr": "//li", "action": "count", "timeout_ms": 5000}, 1) == {"count": 2}
    xpath(ctx, {"expr": "//li", "action": "exists", "timeout_ms": 5000}, 1)

    assert [s["args"]["timeoutMs"] for s in host.scripts] == [0, 0]


def test_indexed_actions_wait(ctx, host) -> None:
    host.responses.append({"ok": True, "value": {"clicked": True}})
    xpath(ctx, {"expr": "//button", "action": "click", "index": 2, "timeout_ms": 700}, 1)
    args = host.scripts[0]["args"]
    assert args["timeoutMs"] == 700
    assert args["index"] == 2


def test_unknown_action(ctx, host) -> None:
    with pytest.raises(UnknownAction) as excinfo:
        xpath(ctx, {"expr": "//a", "action": "hover"}, 1)
    assert str(excinfo.value) == "Unknown xpath action: hover"
    assert host.scripts == []


def test_missing_expr(ctx) -> None:
    with pytest.raises(InvalidArgument):
        xpath(ctx, {"action": "count"}, 1)


def test_get_attribute_requires_attr(ctx) -> None:
    with pytest.raises(InvalidArgument) as excinfo:
        xpath(ctx, {"expr": "//a", "action": "getAttribute"}, 1)
    assert str(excinfo.value) == 'getAttribute requires "attr"'


def test_get_html_is_truncated(ctx, host) -> None:
    host.responses.append({"ok": True, "value": {"html": "<p>hello world</p>"}})
    out = xpath(ctx, {"expr": "//p", "action": "getHTML", "max_len": 5}, 1)
    assert out == {"html": "<p>he", "truncated": True, "length": 18}


def test_page_errors_surface(ctx, host) -> None:
    host.responses.append({"ok": False, "kind": "InvalidXPath", "message": "Invalid XPath: //["})
    host.responses.append({"ok": False, "kind": "NoNodeAtIndex", "message": "No node at index"})
    with pytest.raises(InvalidXPath):
        xpath(ctx, {"expr": "//["}, 1)
    with pytest.raises(NoNodeAtIndex):
        xpath(ctx, {"expr": "//a", "action": "getText", "index": 9, "timeout_ms": 0}, 1)


def test_include_html_must_be_boolean(ctx, host) -> None:
    with pytest.raises(InvalidArgument):
        xpath(ctx, {"expr": "//a", "includeHTML": 1}, 1)
    assert host.scripts == []
