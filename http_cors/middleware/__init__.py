from __future__ import annotations

from http_cors.middleware.cors import CorsMiddleware, apply_cors, create_middleware

__all__ = ["CorsMiddleware", "apply_cors", "create_middleware"]
