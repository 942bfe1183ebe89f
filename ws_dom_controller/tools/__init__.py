"""
Command handlers.

Every handler has the signature `(ctx, payload, tab_id) -> dict`.
"""

from __future__ import annotations

from .base import PageActuator
from .dom import click, exists, get_html, set_value, type_text
from .navigation import navigate, wait_for_tab_load
from .script import exec_js
from .xpath import xpath

__all__ = [
    "PageActuator",
    "click",
    "exec_js",
    "exists",
    "get_html",
    "navigate",
    "set_value",
    "type_text",
    "wait_for_tab_load",
    "xpath",
]
