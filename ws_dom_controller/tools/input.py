"""Synthetic input event plans.

The page scripts replay these sequences verbatim, so what counts as "a click"
or "a keystroke" is decided here rather than inside the injected JavaScript.
"""

from __future__ import annotations

from typing import Any

# Dispatched at the element centre after scrolling it into view.
MOUSE_CLICK_SEQUENCE: tuple[str, ...] = ("mouseover", "mousemove", "mousedown", "mouseup", "click")

# Per character. The element value is extended between keydown and input.
KEYSTROKE_SEQUENCE: tuple[str, ...] = ("keydown", "input", "keypress", "keyup")

ENTER_SEQUENCE: tuple[str, ...] = ("keydown", "keyup")

TYPING_DELAY_MS = 5


def typing_plan(*, clear: bool = True, enter: bool = False) -> dict[str, Any]:
    """Options consumed by the in-page typing routine."""
    return {
        "clear": bool(clear),
        "enter": bool(enter),
        "keystroke": list(KEYSTROKE_SEQUENCE),
        "enterSequence": list(ENTER_SEQUENCE),
        "delayMs": TYPING_DELAY_MS,
    }


def click_plan() -> dict[str, Any]:
    return {"events": list(MOUSE_CLICK_SEQUENCE)}
