"""Error taxonomy for the command bridge.

Every failure a handler can report is a `BridgeError` subclass carrying a stable
`kind`. In-page scripts report failures as `{ok: false, kind, message}` and
`error_from_page` turns them back into the matching class.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for failures converted into error envelopes."""

    kind = "BridgeError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = str(message)

    def __str__(self) -> str:
        return self.message


class InvalidJSON(BridgeError):
    kind = "InvalidJSON"


class UnknownCommand(BridgeError):
    kind = "UnknownCommand"


class InvalidArgument(BridgeError):
    kind = "InvalidArgument"


class InvalidSelector(BridgeError):
    kind = "InvalidSelector"


class InvalidXPath(BridgeError):
    kind = "InvalidXPath"


class ElementNotFound(BridgeError):
    kind = "ElementNotFound"


class NoNodeAtIndex(BridgeError):
    kind = "NoNodeAtIndex"


class NotAnElement(BridgeError):
    kind = "NotAnElement"


class NavigationTimeout(BridgeError):
    kind = "NavigationTimeout"


class ExecutionError(BridgeError):
    kind = "ExecutionError"


class UnknownAction(BridgeError):
    kind = "UnknownAction"


class HostError(BridgeError):
    """The host runtime (CDP endpoint, tab, relay) failed or went away."""

    kind = "HostError"


class PageScriptError(BridgeError):
    """An in-page exception that has no dedicated kind."""

    kind = "PageScriptError"


ERRORS_BY_KIND: dict[str, type[BridgeError]] = {
    cls.kind: cls
    for cls in (
        InvalidJSON,
        UnknownCommand,
        InvalidArgument,
        InvalidSelector,
        InvalidXPath,
        ElementNotFound,
        NoNodeAtIndex,
        NotAnElement,
        NavigationTimeout,
        ExecutionError,
        UnknownAction,
        HostError,
    )
}


def error_from_page(kind: str | None, message: str | None) -> BridgeError:
    cls = ERRORS_BY_KIND.get(str(kind or ""), PageScriptError)
    return cls(str(message or kind or "Unknown page error"))
