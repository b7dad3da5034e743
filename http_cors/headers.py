"""CORS response header writers.

Each writer reads the validated ``CorsConfig`` and writes through a
``ResponseSink``. Writers are idempotent for identical inputs.

References:
- https://developer.mozilla.org/docs/Web/HTTP/Headers/Access-Control-Allow-Origin
- https://fetch.spec.whatwg.org/#http-cors-protocol
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from http_cors.config import CorsConfig
from http_cors.http.interfaces import RequestView, ResponseSink
from http_cors.origin import WILDCARD

logger = logging.getLogger(__name__)

# Response headers
ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_METHODS = "Access-Control-Allow-Methods"
MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"

# Request headers
ORIGIN = "Origin"
REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"

# Browsers treat this as a non-matching origin
DENIED_ORIGIN = "false"


def render_value(value: Any, fallback: Optional[Callable[[], Optional[str]]] = None) -> Optional[str]:
    """Render a configured header value.

    Sequences are joined with ``,`` in order, skipping empty entries; other
    truthy values are stringified. A falsy value or an all-empty sequence
    defers to ``fallback`` when given, else None.
    """
    if isinstance(value, (list, tuple)):
        joined = ",".join(str(v) for v in value if v not in (None, ""))
        if joined:
            return joined
    elif isinstance(value, float) and value.is_integer():
        if value:
            return str(int(value))
    elif value:
        return str(value)
    return fallback() if fallback is not None else None


def set_origin(request: RequestView, response: ResponseSink, config: CorsConfig) -> Optional[str]:
    """Write ``Access-Control-Allow-Origin`` and return the admitted origin."""
    request_origin = request.headers.get(ORIGIN)
    origin = config.origin.resolve(request_origin)
    response.set_header(ALLOW_ORIGIN, origin or DENIED_ORIGIN)
    if origin != WILDCARD:
        response.vary(ORIGIN)
    if origin is None:
        logger.debug("cors.origin.denied", extra={"origin": request_origin})
    return origin


def set_credentials(response: ResponseSink, config: CorsConfig) -> None:
    if config.credentials:
        response.set_header(ALLOW_CREDENTIALS, "true")


def set_exposed_headers(response: ResponseSink, config: CorsConfig) -> None:
    headers = render_value(config.exposed_headers)
    if headers:
        response.set_header(EXPOSE_HEADERS, headers)


def _reflect(request: RequestView, response: ResponseSink, name: str) -> Callable[[], Optional[str]]:
    def fallback() -> Optional[str]:
        response.vary(name)
        return request.headers.get(name)

    return fallback


def set_allowed_headers(request: RequestView, response: ResponseSink, config: CorsConfig) -> None:
    """Allowed request headers for a preflight.

    Without configuration, whatever the browser asks for is allowed.
    """
    headers = render_value(config.allowed_headers, _reflect(request, response, REQUEST_HEADERS))
    if headers and isinstance(headers, str):
        response.set_header(ALLOW_HEADERS, headers)


def set_allowed_methods(request: RequestView, response: ResponseSink, config: CorsConfig) -> None:
    """Allowed methods for a preflight; reflects the requested one when unset."""
    methods = render_value(config.allowed_methods, _reflect(request, response, REQUEST_METHOD))
    if methods and isinstance(methods, str):
        response.set_header(ALLOW_METHODS, methods)


def set_max_age(response: ResponseSink, config: CorsConfig) -> None:
    # 0 is treated as unset
    max_age = render_value(config.max_age)
    if max_age:
        response.set_header(MAX_AGE, max_age)


__all__ = [
    "ALLOW_ORIGIN",
    "ALLOW_CREDENTIALS",
    "EXPOSE_HEADERS",
    "ALLOW_HEADERS",
    "ALLOW_METHODS",
    "MAX_AGE",
    "VARY",
    "ORIGIN",
    "REQUEST_METHOD",
    "REQUEST_HEADERS",
    "DENIED_ORIGIN",
    "render_value",
    "set_origin",
    "set_credentials",
    "set_exposed_headers",
    "set_allowed_headers",
    "set_allowed_methods",
    "set_max_age",
]
