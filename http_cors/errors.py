"""Error types raised by the CORS package.

Evaluation itself never raises: missing request headers and rejected origins
are expressed through the headers written. Only configuration problems are
surfaced as exceptions, at construction time.
"""

from __future__ import annotations


class CorsConfigError(ValueError):
    """Raised when a CORS configuration value cannot be interpreted."""


__all__ = ["CorsConfigError"]
