"""Shared helpers for CORS functional tests.

Requests are plain objects exposing ``method`` and case-insensitive
``headers``; responses use the Starlette-backed ``HeaderSink`` unless a test
needs to observe the raw write calls, in which case ``RecordingSink`` is used.
"""

from __future__ import annotations

from typing import Optional

import pytest
from starlette.datastructures import Headers

from http_cors.http.starlette import HeaderSink


class FakeRequest:
    def __init__(self, method: str = "GET", headers: Optional[dict[str, str]] = None) -> None:
        self.method = method
        self.headers = Headers(headers=headers or {})


class RecordingSink:
    """Response sink recording every call in order (no de-duplication)."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.headers: dict[str, str] = {}
        self.vary_names: list[str] = []
        self.status_code: Optional[int] = None

    def set_header(self, name: str, value: str) -> None:
        self.calls.append(("set_header", name, value))
        self.headers[name] = value

    def vary(self, name: str) -> None:
        self.calls.append(("vary", name))
        self.vary_names.append(name)

    def finalize(self, status_code: int) -> None:
        self.calls.append(("finalize", status_code))
        self.status_code = status_code


@pytest.fixture
def make_request():
    def _make(method: str = "GET", **headers: str) -> FakeRequest:
        # Allow keyword header names like access_control_request_method
        normalized = {k.replace("_", "-"): v for k, v in headers.items()}
        return FakeRequest(method, normalized)

    return _make


@pytest.fixture
def sink() -> HeaderSink:
    return HeaderSink()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()
