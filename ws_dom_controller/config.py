from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONTROLLER_URL = "ws://localhost:8765"
DEFAULT_HELLO = "ws-dom-controller-online"

DEFAULT_BINARY_CANDIDATES: list[str] = [
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/usr/local/bin/chromium",
    "/opt/chromium/chromium",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
    "C:\\Program Files\\Chromium\\Application\\chrome.exe",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/opt/google/chrome/chrome",
    "C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe",
    "C:\\Program Files (x86)\\Google\\Chrome\\Application\\chrome.exe",
    # Snap builds ignore --user-data-dir in some setups.
    "/snap/bin/chromium",
]


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name) or default)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name) or default)
    except ValueError:
        return default


@dataclass
class BridgeConfig:
    controller_url: str = DEFAULT_CONTROLLER_URL
    reconnect_delay: float = 2.0
    hello: str = DEFAULT_HELLO
    mode: str = "launch"
    binary_path: str = "google-chrome"
    profile_path: str = "~/.ws-dom-controller/profile"
    cdp_port: int = 9222
    extra_flags: list[str] = field(default_factory=list)
    headless: bool = False
    nav_timeout: float = 30.0
    cdp_timeout: float = 10.0
    controller_host: str = "localhost"
    controller_port: int = 8765

    @staticmethod
    def normalize_mode(raw: str | None) -> str:
        mode = (raw or "").strip().lower()
        if mode in {"attach", "connect", "external"}:
            return "attach"
        return "launch"

    @classmethod
    def detect_binary(cls) -> str:
        env_path = os.environ.get("WS_DOM_BROWSER_BINARY")
        if env_path:
            return expand_path(env_path)
        for candidate in DEFAULT_BINARY_CANDIDATES:
            path = Path(candidate)
            if path.exists() and os.access(str(path), os.X_OK):
                return str(path)
        # Last resort: rely on PATH lookup
        return "google-chrome"

    @classmethod
    def from_env(cls) -> BridgeConfig:
        flags_raw = os.environ.get("WS_DOM_BROWSER_FLAGS", "")
        return cls(
            controller_url=(os.environ.get("WS_DOM_URL") or DEFAULT_CONTROLLER_URL).strip(),
            reconnect_delay=max(0.0, _env_float("WS_DOM_RECONNECT_DELAY", 2.0)),
            hello=(os.environ.get("WS_DOM_HELLO") or DEFAULT_HELLO).strip(),
            mode=cls.normalize_mode(os.environ.get("WS_DOM_BROWSER_MODE")),
            binary_path=cls.detect_binary(),
            profile_path=expand_path(os.environ.get("WS_DOM_BROWSER_PROFILE", "~/.ws-dom-controller/profile")),
            cdp_port=_env_int("WS_DOM_CDP_PORT", 9222),
            extra_flags=[flag.strip() for flag in flags_raw.split(",") if flag.strip()],
            headless=os.environ.get("WS_DOM_HEADLESS", "0") == "1",
            nav_timeout=max(0.0, _env_float("WS_DOM_NAV_TIMEOUT", 30.0)),
            cdp_timeout=max(1.0, _env_float("WS_DOM_CDP_TIMEOUT", 10.0)),
            controller_host=(os.environ.get("WS_DOM_CONTROLLER_HOST") or "localhost").strip(),
            controller_port=_env_int("WS_DOM_CONTROLLER_PORT", 8765),
        )

    @property
    def cdp_http_base(self) -> str:
        return f"http://127.0.0.1:{self.cdp_port}"
