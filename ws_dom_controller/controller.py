"""Demo controller: the websocket server a bridge connects to.

On each connection it plays a short demo script (open example.org, check for
<h1>, fetch its HTML, read the title), logs every envelope it receives, and
forwards one-line JSON commands typed on stdin to the connected bridge.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import uuid
from collections.abc import Callable
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed

logger = logging.getLogger("ws_dom.controller")

DEMO_STEP_DELAY = 1.0

USAGE_EXAMPLES = (
    '{"cmd":"nav","url":"https://google.com"}',
    '{"cmd":"type","selector":"input[name=q]","text":"hello", "enter":true}',
)


def short_id() -> str:
    return uuid.uuid4().hex[:12]


def build_demo_script(make_id: Callable[[], str] = short_id) -> list[dict[str, Any]]:
    return [
        {"id": make_id(), "cmd": "nav", "url": "https://example.org"},
        {"id": make_id(), "cmd": "exists", "selector": "h1"},
        {"id": make_id(), "cmd": "get_html", "selector": "h1"},
        {"id": make_id(), "cmd": "exec_js", "js": "document.title"},
    ]


def prepare_command(line: str, make_id: Callable[[], str] = short_id) -> dict[str, Any] | None:
    """Parse one stdin line into a command; None for blank lines.

    Raises ValueError when the line is not a JSON object.
    """
    line = (line or "").strip()
    if not line:
        return None
    obj = json.loads(line)
    if not isinstance(obj, dict):
        raise ValueError("command must be a JSON object")
    if not obj.get("id"):
        obj["id"] = make_id()
    return obj


class ControllerServer:
    def __init__(
        self,
        host: str = "localhost",
        port: int = 8765,
        *,
        demo: bool = True,
        demo_delay: float = DEMO_STEP_DELAY,
        on_message: Callable[[Any], None] | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.demo = demo
        self.demo_delay = demo_delay
        self._on_message = on_message
        self._ws: Any | None = None

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def send(self, command: dict[str, Any]) -> dict[str, Any]:
        ws = self._ws
        if ws is None:
            raise RuntimeError("No bridge connected")
        if not command.get("id"):
            command = {**command, "id": short_id()}
        logger.info("-> %s", json.dumps(command))
        await ws.send(json.dumps(command))
        return command

    def _received(self, raw: Any) -> None:
        try:
            msg = json.loads(raw)
        except ValueError:
            logger.info("<- (raw) %s", raw)
            msg = raw
        else:
            logger.info("<- %s", json.dumps(msg, indent=2))
        if self._on_message is not None:
            self._on_message(msg)

    async def _play_demo(self) -> None:
        for step in build_demo_script():
            await self.send(step)
            await asyncio.sleep(self.demo_delay)

    async def _handler(self, ws: Any) -> None:
        logger.info("bridge connected")
        self._ws = ws
        demo_task = asyncio.create_task(self._play_demo()) if self.demo else None
        try:
            async for raw in ws:
                self._received(raw)
        except ConnectionClosed:
            pass
        finally:
            if demo_task is not None:
                demo_task.cancel()
            if self._ws is ws:
                self._ws = None
            logger.info("bridge disconnected")

    async def _read_stdin(self) -> None:
        loop = asyncio.get_running_loop()
        logger.info("Type a JSON command and press Enter. Examples:\n  %s", "\n  ".join(USAGE_EXAMPLES))
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                return
            try:
                command = prepare_command(line)
            except ValueError as exc:
                logger.warning("Invalid JSON: %s", exc)
                continue
            if command is None:
                continue
            try:
                await self.send(command)
            except (RuntimeError, ConnectionClosed) as exc:
                logger.warning("not sent: %s", exc)

    async def serve_forever(self, *, interactive: bool = True) -> None:
        async with websockets.serve(self._handler, self.host, self.port, max_size=None):
            logger.info("Listening on ws://%s:%s", self.host, self.port)
            if interactive:
                await self._read_stdin()
            await asyncio.Future()
