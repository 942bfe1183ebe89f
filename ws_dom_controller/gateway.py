"""Transport endpoint: one persistent websocket connection to a controller.

The bridge dials the controller, greets it, then answers every inbound frame
with exactly one envelope. Frames are handled strictly one at a time: each
command runs in a worker thread and is awaited before the next frame is read,
so the event loop keeps websocket keepalives going during long in-page waits.
If the connection drops, the bridge reconnects after a fixed delay.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .config import BridgeConfig
from .launcher import BrowserLauncher
from .server.correlator import Correlator
from .server.registry import create_default_registry
from .server.types import HandlerContext, encode_envelope, hello_envelope
from .tab_host import CdpTabHost, TabHost
from .tabs import TabResolver, TabStore
from .tools.base import PageActuator

logger = logging.getLogger("ws_dom.bridge")


class BridgeClient:
    def __init__(self, config: BridgeConfig, correlator: Correlator) -> None:
        self.config = config
        self.correlator = correlator
        self._stop = asyncio.Event()
        self._ws: Any | None = None
        self.connections = 0

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def run(self) -> None:
        """Connect, serve, and reconnect until `stop()` is called."""
        url = self.config.controller_url
        while not self._stop.is_set():
            try:
                async with websockets.connect(url, open_timeout=5, max_size=None) as ws:
                    logger.info("connected to %s", url)
                    await self._serve(ws)
            except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
                logger.warning("connection to %s failed: %s", url, exc)

            if self._stop.is_set():
                break
            delay = self.config.reconnect_delay
            logger.info("websocket closed; reconnecting in %.1fs", delay)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stop.wait(), timeout=delay)

    async def stop(self) -> None:
        self._stop.set()
        ws = self._ws
        if ws is not None:
            with contextlib.suppress(WebSocketException, OSError):
                await ws.close()

    async def _serve(self, ws: Any) -> None:
        self._ws = ws
        self.connections += 1
        try:
            await ws.send(encode_envelope(hello_envelope(self.config.hello)))
            async for raw in ws:
                reply = await asyncio.to_thread(self.correlator.handle_raw, raw)
                try:
                    await ws.send(encode_envelope(reply))
                except ConnectionClosed:
                    # No buffering or replay across reconnects.
                    logger.warning("connection closed before reply; dropped id=%s", reply.get("id"))
                    raise
        finally:
            self._ws = None


def create_bridge(
    config: BridgeConfig,
    *,
    host: TabHost | None = None,
    store: TabStore | None = None,
) -> BridgeClient:
    """Wire the default handler stack onto a CDP host (or the given one)."""
    if host is None:
        host = CdpTabHost(config, BrowserLauncher(config))
    context = HandlerContext(
        config=config,
        host=host,
        resolver=TabResolver(host, store),
        actuator=PageActuator(host),
    )
    return BridgeClient(config, Correlator(create_default_registry(), context))
