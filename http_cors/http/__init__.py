"""Host server capabilities consumed by the CORS evaluation.

Starlette adapters live in ``http_cors.http.starlette`` and are imported
explicitly so the core stays free of host framework imports.
"""

from __future__ import annotations

from http_cors.http.interfaces import HeaderLookup, RequestView, ResponseSink

__all__ = ["HeaderLookup", "RequestView", "ResponseSink"]
