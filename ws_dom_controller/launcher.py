"""Bring up a Chromium with remote debugging on the configured CDP port."""

from __future__ import annotations

import contextlib
import logging
import socket
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .config import BridgeConfig, expand_path
from .errors import HostError
from .polling import poll_until
from .session_cdp import http_get_json

logger = logging.getLogger("ws_dom.launcher")

LAUNCH_POLL_INTERVAL = 0.1


@dataclass
class LaunchResult:
    command: list[str]
    started: bool
    message: str


class BrowserLauncher:
    def __init__(self, config: BridgeConfig | None = None) -> None:
        self.config = config or BridgeConfig.from_env()
        self.process: subprocess.Popen | None = None

    def cdp_ready(self, timeout: float = 0.4) -> bool:
        """True once the browser answers /json/version with a debugger URL."""
        try:
            version = http_get_json(f"{self.config.cdp_http_base}/json/version", timeout=timeout)
        except HostError:
            return False
        return isinstance(version, dict) and bool(version.get("webSocketDebuggerUrl"))

    def build_launch_command(self) -> list[str]:
        cfg = self.config
        cmd = [
            cfg.binary_path,
            f"--remote-debugging-port={cfg.cdp_port}",
            f"--user-data-dir={expand_path(cfg.profile_path)}",
            # CDP rejects websocket clients that send an Origin unless allowed.
            "--remote-allow-origins=*",
            "--no-first-run",
            "--no-default-browser-check",
        ]
        if cfg.headless:
            cmd.append("--headless=new")
        cmd.extend(cfg.extra_flags)
        return cmd

    def _port_free(self) -> bool:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(0.2)
            try:
                return sock.connect_ex(("127.0.0.1", self.config.cdp_port)) != 0
            except OSError:
                return False

    def ensure_running(self, timeout: float = 10.0) -> LaunchResult:
        """Attach to a listening browser, or (launch mode only) start one and wait for CDP."""
        port = self.config.cdp_port
        if self.cdp_ready():
            return LaunchResult([], False, f"Browser already listening on CDP port {port}")
        if self.config.mode == "attach":
            return LaunchResult(
                [], False, f"Attach mode: no browser listening on CDP port {port} (start it with --remote-debugging-port)"
            )
        if not self._port_free():
            return LaunchResult([], False, f"Port {port} is taken by something that does not speak CDP")

        with contextlib.suppress(OSError):
            Path(expand_path(self.config.profile_path)).mkdir(parents=True, exist_ok=True)

        cmd = self.build_launch_command()
        logger.info("launching browser: %s", " ".join(cmd))
        try:
            self.process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            return LaunchResult(cmd, False, f"Browser launch failed: {exc}")

        if poll_until(self.cdp_ready, timeout=timeout, interval=LAUNCH_POLL_INTERVAL):
            return LaunchResult(cmd, True, "Browser launched")
        return LaunchResult(cmd, False, f"Browser did not open CDP port {port} within {timeout:.0f}s")
