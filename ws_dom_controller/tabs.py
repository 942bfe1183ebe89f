"""Target tab resolution and the remembered "last tab" slot."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from .errors import HostError
from .tab_host import TabHost

logger = logging.getLogger("ws_dom.tabs")


class TabStore(Protocol):
    def get(self) -> int | None: ...

    def set(self, tab_id: int) -> None: ...


class MemoryTabStore:
    """Single-slot store for the last controlled tab, scoped to the bridge process."""

    def __init__(self, tab_id: int | None = None) -> None:
        self._lock = threading.Lock()
        self._tab_id = tab_id

    def get(self) -> int | None:
        with self._lock:
            return self._tab_id

    def set(self, tab_id: int) -> None:
        with self._lock:
            self._tab_id = tab_id


def as_tab_id(value: Any) -> int | None:
    """Return `value` as a tab id if it is an integral number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class TabResolver:
    def __init__(self, host: TabHost, store: TabStore | None = None) -> None:
        self._host = host
        self._store = store if store is not None else MemoryTabStore()

    def remembered(self) -> int | None:
        return as_tab_id(self._store.get())

    def remember(self, tab_id: int) -> None:
        self._store.set(tab_id)

    def resolve(self, preferred_id: Any = None) -> int:
        """Pick the tab a command applies to.

        Order: explicit id (returned untouched), remembered tab if it still
        exists, the active tab, and finally a freshly created blank tab. Lookup
        failures fall through; only a failed tab creation propagates.
        """
        explicit = as_tab_id(preferred_id)
        if explicit is not None:
            return explicit

        stored = self.remembered()
        if stored is not None:
            try:
                tab = self._host.get_tab(stored)
            except HostError as exc:
                logger.debug("remembered tab %s unavailable: %s", stored, exc)
                tab = None
            if tab is not None and not tab.discarded:
                self.remember(stored)
                return stored

        try:
            active = self._host.query_active_tab()
        except HostError as exc:
            logger.debug("active tab query failed: %s", exc)
            active = None
        if active is not None:
            self.remember(active.id)
            return active.id

        tab = self._host.create_tab("about:blank", active=True)
        logger.info("created blank tab %s", tab.id)
        self.remember(tab.id)
        return tab.id
