"""Raw CDP plumbing: HTTP discovery endpoints and a blocking websocket connection."""

from __future__ import annotations

import json
import socket
import time
from contextlib import suppress
from typing import Any
from urllib.error import URLError
from urllib.request import Request, urlopen

import websocket

from .errors import HostError


def http_get_json(url: str, timeout: float = 2.0) -> Any:
    """Fetch JSON from a CDP HTTP endpoint."""
    try:
        req = Request(url, headers={"User-Agent": "ws-dom-controller"})
        with urlopen(req, timeout=timeout) as resp:
            return json.loads(resp.read().decode())
    except (OSError, URLError, ValueError) as exc:
        raise HostError(f"CDP endpoint not reachable: {exc}") from exc


class CdpConnection:
    """Low-level CDP WebSocket connection."""

    def __init__(self, ws_url: str, timeout: float = 5.0):
        try:
            self.ws = websocket.create_connection(ws_url, timeout=timeout, suppress_origin=True)
        except (OSError, websocket.WebSocketException) as exc:
            raise HostError(f"CDP connect failed: {exc}") from exc
        self.ws_url = ws_url
        self.timeout = timeout
        self._next_id = 1

    def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send CDP command and wait for response."""
        msg_id = self._next_id
        self._next_id += 1

        msg: dict[str, Any] = {"id": msg_id, "method": method}
        if params:
            msg["params"] = params

        try:
            self.ws.settimeout(min(2.0, max(0.5, float(self.timeout))))
            self.ws.send(json.dumps(msg))
        except (OSError, websocket.WebSocketException) as exc:
            raise HostError(f"CDP send failed: {exc}") from exc

        return self._recv_until(msg_id, method)

    def _recv_until(self, expected_id: int, method: str) -> dict[str, Any]:
        deadline = time.time() + self.timeout
        while True:
            remaining = deadline - time.time()
            if remaining <= 0:
                raise HostError(f"CDP response timed out: {method}")

            # Short socket timeouts so the overall deadline is enforced here.
            try:
                self.ws.settimeout(min(0.5, remaining))
                raw = self.ws.recv()
            except (TimeoutError, socket.timeout, websocket.WebSocketTimeoutException):
                continue
            except (OSError, websocket.WebSocketException) as exc:
                raise HostError(f"CDP connection lost: {exc}") from exc

            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(data, dict):
                continue

            # Events (the bridge enables no domains) and stale replies.
            if data.get("id") != expected_id:
                continue
            if "error" in data:
                err = data["error"]
                message = err.get("message") if isinstance(err, dict) else err
                raise HostError(f"{method} failed: {message}")
            return data.get("result", {})

    def close(self) -> None:
        with suppress(Exception):
            self.ws.close()
