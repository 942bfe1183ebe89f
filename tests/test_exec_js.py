from __future__ import annotations

import pytest

from ws_dom_controller.errors import ExecutionError, InvalidArgument
from ws_dom_controller.tools import exec_js
from ws_dom_controller.tools.js_helpers import EXEC_JS


def test_exec_js_passes_expression_through(ctx, host) -> None:
    host.responses.append({"ok": True, "value": {"result": 4}})

    assert exec_js(ctx, {"js": "2 + 2"}, 1) == {"result": 4}

    sent = host.scripts[0]
    assert sent["args"] == {"js": "2 + 2"}
    assert '"use strict"' in sent["source"]


def test_exec_js_requires_js(ctx) -> None:
    with pytest.raises(InvalidArgument) as excinfo:
        exec_js(ctx, {"js": "  "}, 1)
    assert str(excinfo.value) == 'exec_js: missing "js"'


def test_exec_js_error_kind(ctx, host) -> None:
    host.responses.append({"ok": False, "kind": "ExecutionError", "message": "exec_js error: x is not defined"})
    with pytest.raises(ExecutionError, match="x is not defined"):
        exec_js(ctx, {"js": "x"}, 1)


def test_snippet_is_wrapped_with_prelude(ctx, host) -> None:
    exec_js(ctx, {"js": "1"}, 1)
    source = host.scripts[0]["source"]
    assert "__waitFor" in source
    assert EXEC_JS.strip() in source
    assert "__PRELUDE__" not in source and "__BODY__" not in source
