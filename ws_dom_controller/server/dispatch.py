"""
Command registry with dispatch table.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import UnknownCommand
from .types import HandlerContext, HandlerFunc

logger = logging.getLogger("ws_dom.dispatch")


class HandlerRegistry:
    """Registry for command handlers with target-tab resolution."""

    def __init__(self) -> None:
        # name -> (handler, needs_tab)
        self._handlers: dict[str, tuple[HandlerFunc, bool]] = {}

    def register(self, name: str, handler: HandlerFunc, needs_tab: bool = True) -> None:
        """Register a command handler."""
        self._handlers[name] = (handler, needs_tab)

    def register_many(self, handlers: dict[str, tuple[HandlerFunc, bool]]) -> None:
        self._handlers.update(handlers)

    def get(self, name: str) -> tuple[HandlerFunc, bool] | None:
        return self._handlers.get(name)

    def dispatch(self, name: str | None, ctx: HandlerContext, payload: dict[str, Any]) -> dict[str, Any]:
        """Run the handler for `name`.

        Handlers flagged `needs_tab` get a tab resolved from `payload["tabId"]`
        and have that id merged into their result. Others (nav) resolve their own.
        """
        handler_info = self.get(name) if name else None
        if handler_info is None:
            raise UnknownCommand(f"Unknown cmd: {name}")

        handler, needs_tab = handler_info
        if not needs_tab:
            return handler(ctx, payload, None)

        tab_id = ctx.resolver.resolve(payload.get("tabId"))
        logger.debug("cmd=%s tab=%s", name, tab_id)
        result = handler(ctx, payload, tab_id)
        return {"tabId": tab_id, **(result or {})}

    @property
    def command_names(self) -> list[str]:
        return list(self._handlers.keys())
