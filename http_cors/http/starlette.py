"""Starlette-backed request view and response sink.

``ScopeRequest`` reads an ASGI scope. ``HeaderSink`` collects response
headers into a ``MutableHeaders`` and remembers the terminal status once
finalized.
"""

from __future__ import annotations

from typing import List, Optional

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response
from starlette.types import Message, Scope

VARY = "vary"


def split_header_tokens(value: Optional[str]) -> List[str]:
    """Split a comma-separated header value into stripped, non-empty tokens."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def append_vary(headers: MutableHeaders, name: str) -> None:
    """Append ``name`` to ``Vary`` unless already present (case-insensitive).

    Tokens from every ``Vary`` line are collected and rewritten as one line.
    A ``Vary: *`` response already varies on everything and is left alone.
    """
    tokens = [token for line in headers.getlist(VARY) for token in split_header_tokens(line)]
    lowered = {token.lower() for token in tokens}
    if "*" in lowered or name.lower() in lowered:
        return
    tokens.append(name)
    headers[VARY] = ", ".join(tokens)


class ScopeRequest:
    """Request view over a raw ASGI HTTP scope."""

    def __init__(self, scope: Scope) -> None:
        self.method = str(scope.get("method") or "")
        self.headers = Headers(scope=scope)


class HeaderSink:
    """Response sink writing into Starlette ``MutableHeaders``."""

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self.status_code: Optional[int] = None

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def vary(self, name: str) -> None:
        append_vary(self.headers, name)

    def finalize(self, status_code: int) -> None:
        self.status_code = status_code

    def to_response(self) -> Response:
        """Build the terminal (empty body) response for a finalized sink."""
        return Response(status_code=self.status_code or 200, headers=dict(self.headers))

    def apply_to_message(self, message: Message) -> None:
        """Merge collected headers into an ``http.response.start`` message.

        CORS headers overwrite whatever the inner app set; ``Vary`` tokens are
        merged with the existing value.
        """
        message.setdefault("headers", [])
        target = MutableHeaders(scope=message)
        for name, value in self.headers.items():
            if name == VARY:
                for token in split_header_tokens(value):
                    append_vary(target, token)
            else:
                target[name] = value


__all__ = ["HeaderSink", "ScopeRequest"]
