"""CORS configuration.

``CorsConfig`` is the validated, immutable configuration consumed by the
evaluation. It accepts the canonical snake_case field names as well as the
camelCase and short aliases (``headers``, ``methods``) used by other CORS
middlewares; aliases collapse to one canonical field at construction time.

``load_config`` builds a configuration from the environment with the
following rules:
- Primary source: `cors_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic enforces field types; origin policies are compiled.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator, model_validator

from http_cors.origin import OriginPolicy, Pattern, compile_policy

CONFIG_DIR = Path("config")
ROOT_CORS_CONFIG = Path("cors_config.json")
logger = logging.getLogger(__name__)

HeaderValue = Union[str, Tuple[str, ...]]

# Accepted keys per canonical field, highest precedence first
_ALIASES: dict[str, Tuple[str, ...]] = {
    "exposed_headers": ("exposed_headers", "exposedHeaders"),
    "allowed_headers": ("allowed_headers", "allowedHeaders", "headers"),
    "allowed_methods": ("allowed_methods", "allowedMethods", "methods"),
    "max_age": ("max_age", "maxAge"),
}


class CorsConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Compiled OriginPolicy variant (see http_cors.origin)
    origin: Any = Field(default=None, validate_default=True)
    credentials: bool = False
    exposed_headers: Optional[HeaderValue] = None
    allowed_headers: Optional[HeaderValue] = None
    allowed_methods: Optional[HeaderValue] = None
    max_age: Optional[Union[int, float]] = None

    @model_validator(mode="before")
    @classmethod
    def collapse_aliases(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        for field, keys in _ALIASES.items():
            present = [key for key in keys if data.get(key) is not None]
            chosen = data.get(present[0]) if present else None
            if len(present) > 1:
                logger.warning(
                    "cors.config.alias_conflict",
                    extra={"field": field, "used": present[0], "ignored": present[1:]},
                )
            for key in keys:
                data.pop(key, None)
            if chosen is not None:
                data[field] = chosen
        return data

    @field_validator("origin", mode="before")
    @classmethod
    def compile_origin(cls, v: Any) -> OriginPolicy:
        # CorsConfigError is a ValueError, so pydantic reports it as a ValidationError
        return compile_policy(v)


def coerce_config(config: Union[CorsConfig, Mapping[str, Any], None]) -> CorsConfig:
    """Return ``config`` as a ``CorsConfig``, validating plain mappings."""
    if isinstance(config, CorsConfig):
        return config
    return CorsConfig.model_validate(dict(config or {}))


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _split_list(text: Optional[str]) -> Optional[Tuple[str, ...]]:
    if text is None:
        return None
    items = tuple(part.strip() for part in str(text).split(",") if part.strip())
    return items or None


def _origin_policy(origins_text: Optional[str], regex_text: Optional[str]) -> Any:
    origins = _split_list(origins_text)
    entries: list[Any] = list(origins or ())
    if regex_text and regex_text.strip():
        entries.append(Pattern(re.compile(regex_text.strip())))
    if not entries:
        return None
    # One plain value keeps the any/fixed origin semantics
    if len(entries) == 1 and isinstance(entries[0], str):
        return entries[0]
    return entries


def load_config() -> CorsConfig:
    """Load CORS configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) cors_config.json at project root
    4) Defaults: any origin, no credentials, reflected methods/headers
    """

    base = _read_json_file(ROOT_CORS_CONFIG)
    if not isinstance(base, dict):
        logger.error("Ignoring %s: expected a JSON object", ROOT_CORS_CONFIG)
        base = {}

    def _pick(env_key: str, file_name: str) -> Optional[str]:
        return _env(env_key) or _read_config_file(file_name)

    origins_text = _pick("CORS_ALLOW_ORIGINS", "cors.allow_origins")
    regex_text = _pick("CORS_ALLOW_ORIGIN_REGEX", "cors.allow_origin_regex")
    credentials_text = _pick("CORS_ALLOW_CREDENTIALS", "cors.allow_credentials")
    expose_text = _pick("CORS_EXPOSE_HEADERS", "cors.expose_headers")
    headers_text = _pick("CORS_ALLOW_HEADERS", "cors.allow_headers")
    methods_text = _pick("CORS_ALLOW_METHODS", "cors.allow_methods")
    max_age_text = _pick("CORS_MAX_AGE", "cors.max_age")

    data: dict[str, Any] = dict(base)
    if origins_text or regex_text:
        data["origin"] = _origin_policy(origins_text, regex_text)
    if credentials_text:
        data["credentials"] = credentials_text.strip().lower() == "true"
    overrides = {
        "exposed_headers": _split_list(expose_text),
        "allowed_headers": _split_list(headers_text),
        "allowed_methods": _split_list(methods_text),
    }
    for field, value in overrides.items():
        if value is not None:
            for key in _ALIASES[field]:
                data.pop(key, None)
            data[field] = value
    if max_age_text:
        for key in _ALIASES["max_age"]:
            data.pop(key, None)
        data["max_age"] = max_age_text.strip()

    try:
        return CorsConfig.model_validate(data)
    except PydanticValidationError as e:
        logger.error("Invalid CORS configuration: %s", e)
        raise


__all__ = [
    "CorsConfig",
    "HeaderValue",
    "coerce_config",
    "load_config",
]
