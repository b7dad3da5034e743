"""CORS evaluation for a single request/response pair.

``evaluate`` is the entry point: it writes the CORS headers for the request
and, for a preflight, finalizes the response. The result tells the caller
whether normal request processing should continue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from http_cors import headers as h
from http_cors.config import CorsConfig, coerce_config
from http_cors.http.interfaces import RequestView, ResponseSink

logger = logging.getLogger(__name__)

PREFLIGHT_METHOD = "OPTIONS"
PREFLIGHT_STATUS = 200


@dataclass(frozen=True)
class NotHandled:
    """Continue normal processing (CORS headers may have been written)."""

    status_code: int = 0

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Handled:
    """The response was finalized with ``status_code``."""

    status_code: int

    def __bool__(self) -> bool:
        return True


NOT_HANDLED = NotHandled()
CorsResult = Union[NotHandled, Handled]


def is_preflight(request: RequestView) -> bool:
    """True for an OPTIONS request carrying a non-empty Access-Control-Request-Method."""
    requested = request.headers.get(h.REQUEST_METHOD)
    return request.method == PREFLIGHT_METHOD and isinstance(requested, str) and bool(requested)


def evaluate(
    request: RequestView,
    response: ResponseSink,
    config: Union[CorsConfig, Mapping[str, Any], None],
) -> CorsResult:
    """Write the CORS headers for ``request`` and finalize preflights.

    Returns ``Handled(200)`` when a preflight was answered, otherwise
    ``NotHandled``. A plain mapping ``config`` is validated on every call
    (alias conflicts are logged each time); hosts evaluating many requests
    should build a ``CorsConfig`` once or use ``create_middleware``.
    """
    config = coerce_config(config)

    # A CORS request includes the Origin header
    if request.headers.get(h.ORIGIN) is None:
        return NOT_HANDLED

    if not h.set_origin(request, response, config):
        return NOT_HANDLED

    h.set_credentials(response, config)
    h.set_exposed_headers(response, config)

    if not is_preflight(request):
        return NOT_HANDLED

    h.set_allowed_methods(request, response, config)
    h.set_allowed_headers(request, response, config)
    h.set_max_age(response, config)
    response.finalize(PREFLIGHT_STATUS)
    logger.debug(
        "cors.preflight.handled",
        extra={"origin": request.headers.get(h.ORIGIN), "status": PREFLIGHT_STATUS},
    )
    return Handled(PREFLIGHT_STATUS)


def set_cors(
    request: RequestView,
    response: ResponseSink,
    config: Union[CorsConfig, Mapping[str, Any], None],
) -> int:
    """Numeric form of ``evaluate``: 0 to continue, else the status written.

    Mapping configs are re-validated per call, as in ``evaluate``.
    """
    return evaluate(request, response, config).status_code


__all__ = [
    "PREFLIGHT_METHOD",
    "PREFLIGHT_STATUS",
    "NotHandled",
    "Handled",
    "NOT_HANDLED",
    "CorsResult",
    "is_preflight",
    "evaluate",
    "set_cors",
]
