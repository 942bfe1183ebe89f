"""
Default command table.
"""

from __future__ import annotations

from .dispatch import HandlerRegistry


def create_default_registry() -> HandlerRegistry:
    """Create the registry with every built-in command."""
    from .. import tools

    registry = HandlerRegistry()
    registry.register_many(
        {
            # nav picks (or creates) its own tab.
            "nav": (tools.navigate, False),
            "click": (tools.click, True),
            "type": (tools.type_text, True),
            "set": (tools.set_value, True),
            "exists": (tools.exists, True),
            "get_html": (tools.get_html, True),
            "exec_js": (tools.exec_js, True),
            "xpath": (tools.xpath, True),
        }
    )
    return registry
