"""CORS middleware adapters.

Two shapes are provided:
- ``create_middleware``: a ``(request, response, next_)`` callback for
  chained-handler hosts. ``next_`` runs only when the request was not
  short-circuited as a preflight.
- ``CorsMiddleware``: pure ASGI middleware for Starlette/FastAPI. Preflights
  are answered directly; other responses get the CORS headers merged into
  their ``http.response.start`` message. Streaming bodies are not buffered.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from fastapi import FastAPI
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from http_cors.config import CorsConfig, coerce_config
from http_cors.evaluate import evaluate
from http_cors.http.interfaces import RequestView, ResponseSink
from http_cors.http.starlette import HeaderSink, ScopeRequest


Handler = Callable[[RequestView, ResponseSink, Callable[[], Any]], None]


def create_middleware(config: Union[CorsConfig, Mapping[str, Any], None] = None) -> Handler:
    """Create a chained-handler CORS middleware.

    ``config`` is validated once here and shared read-only by every call.
    """
    cfg = coerce_config(config)

    def cors_handler(request: RequestView, response: ResponseSink, next_: Callable[[], Any]) -> None:
        if not evaluate(request, response, cfg):
            next_()

    return cors_handler


class CorsMiddleware:
    """ASGI middleware applying CORS headers and answering preflights."""

    def __init__(self, app: ASGIApp, config: Union[CorsConfig, Mapping[str, Any], None] = None, **options: Any) -> None:
        self.app = app
        if config is not None and options:
            raise TypeError("pass either config or keyword options, not both")
        self.config = coerce_config(config if config is not None else options)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        # Only HTTP requests are relevant
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        sink = HeaderSink()
        result = evaluate(ScopeRequest(scope), sink, self.config)
        if result:
            await sink.to_response()(scope, receive, send)
            return

        if not sink.headers:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message.get("type") == "http.response.start":
                sink.apply_to_message(message)
            await send(message)

        await self.app(scope, receive, send_with_cors)


def apply_cors(app: FastAPI, config: Optional[Union[CorsConfig, Mapping[str, Any]]] = None) -> None:
    app.add_middleware(CorsMiddleware, config=coerce_config(config))


__all__ = ["create_middleware", "CorsMiddleware", "apply_cors"]
