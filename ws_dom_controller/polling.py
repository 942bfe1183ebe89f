"""Bounded "poll until predicate or deadline" loop shared by the wait helpers."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

ELEMENT_POLL_INTERVAL_MS = 100
TAB_LOAD_POLL_INTERVAL = 0.25


def poll_until(
    predicate: Callable[[], T],
    *,
    timeout: float,
    interval: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T | None:
    """Call `predicate` until it returns a truthy value or `timeout` seconds pass.

    The predicate is always evaluated at least once, and once more after the
    deadline, so a zero timeout degrades to a single immediate check.
    Returns the truthy value, or None on timeout.
    """
    deadline = clock() + max(0.0, float(timeout))
    while True:
        value = predicate()
        if value:
            return value
        remaining = deadline - clock()
        if remaining <= 0:
            return None
        sleep(min(max(0.0, float(interval)), remaining))
