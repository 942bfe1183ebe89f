"""
Envelope and handler types for the command bridge.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..errors import InvalidArgument, InvalidJSON

if TYPE_CHECKING:
    from ..config import BridgeConfig
    from ..tab_host import TabHost
    from ..tabs import TabResolver
    from ..tools.base import PageActuator


def new_request_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class CommandEnvelope:
    """Inbound `{id, cmd, payload}`; payload fields may sit beside id/cmd or under "payload"."""

    id: Any
    cmd: str | None
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_message(cls, message: Any) -> CommandEnvelope:
        if not isinstance(message, dict):
            raise InvalidArgument("Envelope must be a JSON object")
        req_id = message.get("id")
        if req_id is None or req_id == "":
            req_id = new_request_id()
        cmd = message.get("cmd")
        nested = message.get("payload")
        payload: dict[str, Any] = dict(nested) if isinstance(nested, dict) else {}
        for key, value in message.items():
            if key in ("id", "cmd") or (key == "payload" and isinstance(nested, dict)):
                continue
            payload[key] = value
        return cls(id=req_id, cmd=cmd if isinstance(cmd, str) else None, payload=payload)


def parse_json(raw: str | bytes) -> Any:
    """Decode one inbound frame; raises InvalidJSON on malformed input."""
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)
        return json.loads(text)
    except (UnicodeDecodeError, ValueError) as exc:
        raise InvalidJSON("Invalid JSON received") from exc


def result_envelope(req_id: Any, result: Any) -> dict[str, Any]:
    return {"id": req_id, "ok": True, "result": result}


def error_envelope(req_id: Any, message: str) -> dict[str, Any]:
    return {"id": req_id, "ok": False, "error": str(message)}


def hello_envelope(name: str) -> dict[str, Any]:
    return {"id": new_request_id(), "ok": True, "hello": name}


def encode_envelope(envelope: dict[str, Any]) -> str:
    # json.dumps escapes control characters, so frames never contain raw newlines.
    return json.dumps(envelope, ensure_ascii=False)


@dataclass(slots=True)
class HandlerContext:
    """Collaborators handed to every command handler."""

    config: BridgeConfig
    host: TabHost
    resolver: TabResolver
    actuator: PageActuator


HandlerFunc = Callable[[HandlerContext, dict[str, Any], "int | None"], dict[str, Any]]
