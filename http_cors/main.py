from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional, Union

from fastapi import FastAPI, Response

from http_cors.config import CorsConfig, load_config
from http_cors.logging_setup import configure_logging
from http_cors.middleware.cors import apply_cors

logger = logging.getLogger(__name__)


def create_app(config: Optional[Union[CorsConfig, Mapping[str, Any]]] = None) -> FastAPI:
    """Small FastAPI host wired with the CORS middleware.

    Without an explicit ``config`` the configuration is loaded from the
    environment (see ``http_cors.config.load_config``).
    """
    configure_logging(os.getenv("CORS_LOG_LEVEL"))
    cfg = config if config is not None else load_config()

    app = FastAPI(title="http-cors demo")
    apply_cors(app, cfg)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.put("/items/{item_id}")
    def put_item(item_id: str, response: Response) -> dict:
        response.headers["X-Item-Id"] = item_id
        return {"id": item_id}

    logger.info("cors.app.created")
    return app


__all__ = ["create_app"]
