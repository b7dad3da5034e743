"""CORS header evaluation and middleware for HTTP servers.

The core (``evaluate``) decides which origin to echo, which CORS headers to
attach and whether a request is a preflight that should be answered
directly. ``create_middleware`` and ``CorsMiddleware`` wrap it for
chained-handler and ASGI hosts respectively.
"""

from __future__ import annotations

from http_cors.config import CorsConfig, load_config
from http_cors.errors import CorsConfigError
from http_cors.evaluate import Handled, NotHandled, evaluate, is_preflight, set_cors
from http_cors.middleware.cors import CorsMiddleware, create_middleware
from http_cors.origin import AnyOf, Exact, Pattern, Predicate, compile_policy, resolve_origin

__all__ = [
    "CorsConfig",
    "CorsConfigError",
    "CorsMiddleware",
    "AnyOf",
    "Exact",
    "Pattern",
    "Predicate",
    "Handled",
    "NotHandled",
    "compile_policy",
    "create_middleware",
    "evaluate",
    "is_preflight",
    "load_config",
    "resolve_origin",
    "set_cors",
]
