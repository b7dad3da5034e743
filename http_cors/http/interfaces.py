"""Request/response capabilities supplied by the host HTTP server.

The evaluation reads a method and case-insensitive headers from the request
and only writes through the three response operations below.
"""

from __future__ import annotations

from typing import Optional, Protocol


class HeaderLookup(Protocol):
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]: ...


class RequestView(Protocol):
    """Read-only request: method plus case-insensitive header lookup."""

    @property
    def method(self) -> str: ...

    @property
    def headers(self) -> HeaderLookup: ...


class ResponseSink(Protocol):
    """Write-only response operations."""

    def set_header(self, name: str, value: str) -> None:
        """Set ``name`` to ``value``, overwriting any prior value."""
        ...

    def vary(self, name: str) -> None:
        """Append ``name`` to the ``Vary`` header."""
        ...

    def finalize(self, status_code: int) -> None:
        """Set the status code and terminate the response with no body."""
        ...


__all__ = ["HeaderLookup", "RequestView", "ResponseSink"]
