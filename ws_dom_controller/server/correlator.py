"""
Request/response correlation.

`Correlator.handle_raw` is the single entry point for inbound frames: it always
returns exactly one outbound envelope carrying the request id (or `id: null`
when the frame is not valid JSON), and never raises.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import BridgeError
from .dispatch import HandlerRegistry
from .redaction import redact_payload
from .types import (
    CommandEnvelope,
    HandlerContext,
    error_envelope,
    new_request_id,
    parse_json,
    result_envelope,
)

logger = logging.getLogger("ws_dom.correlator")

PING_COMMAND = "ping"


class Correlator:
    def __init__(self, registry: HandlerRegistry, context: HandlerContext) -> None:
        self.registry = registry
        self.context = context

    def handle_raw(self, raw: str | bytes) -> dict[str, Any]:
        try:
            message = parse_json(raw)
        except BridgeError as exc:
            logger.info("invalid_json: %s", exc)
            return error_envelope(None, str(exc))
        return self.handle(message)

    def handle(self, message: Any) -> dict[str, Any]:
        try:
            envelope = CommandEnvelope.from_message(message)
        except BridgeError as exc:
            return error_envelope(new_request_id(), str(exc))

        if envelope.cmd == PING_COMMAND:
            return result_envelope(envelope.id, "pong")

        logger.info("cmd=%s id=%s args=%s", envelope.cmd, envelope.id, redact_payload(envelope.payload))
        try:
            result = self.registry.dispatch(envelope.cmd, self.context, envelope.payload)
        except BridgeError as e:
            logger.info("cmd_error cmd=%s id=%s kind=%s reason=%s", envelope.cmd, envelope.id, e.kind, e)
            return error_envelope(envelope.id, str(e))
        except Exception as exc:
            logger.exception("cmd_failed cmd=%s id=%s", envelope.cmd, envelope.id)
            return error_envelope(envelope.id, str(exc) or type(exc).__name__)
        return result_envelope(envelope.id, result)
