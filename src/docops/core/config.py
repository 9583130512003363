"""Configuration helpers for the document database API.

This module centralizes how the API base URL, credentials and timeouts are
resolved (explicit values first, then environment variables) and applies
small but important normalization rules (such as sanitizing the base URL)
to avoid malformed request URLs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import requests

from docops.core.adapters.docdbapi import DocDbApiAdapter

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT_SECONDS = 30.0

_API_URL_ENV = "DOCOPS_API_URL"
_TOKEN_ENV = "DOCOPS_TOKEN"
_TIMEOUT_ENV = "DOCOPS_TIMEOUT"
_FULL_REFRESH_ENV = "DOCOPS_FULL_REFRESH_ON_CREATE"
_LOG_LEVEL_ENV = "DOCOPS_LOG_LEVEL"


class ConfigError(RuntimeError):
    """Raised when the API configuration is invalid."""


@dataclass(frozen=True)
class ApiConfig:
    """Resolved settings for talking to the API."""

    base_url: str
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    full_refresh_on_create: bool = False


def _sanitize_base_url(url: str | None) -> str | None:
    """
    Normalize an API base URL.

    - Removes query strings (e.g. '?session=abc')
    - Removes trailing slashes

    Endpoint paths are appended verbatim, so this avoids double slashes and
    stray query parameters in request URLs.
    """
    if not url:
        return url
    url = url.strip().split("?", 1)[0]
    return url.rstrip("/")


def _parse_timeout(raw: str | float | None) -> float:
    """Return a positive timeout in seconds."""
    if raw is None or raw == "":
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout: {raw!r} (expected seconds)") from exc
    if value <= 0:
        raise ConfigError(f"Invalid timeout: {raw!r} (must be > 0)")
    return value


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


def load_config(
    api_url: str | None = None,
    token: str | None = None,
    timeout: float | None = None,
) -> ApiConfig:
    """
    Resolve the API configuration.

    Explicit arguments win over the DOCOPS_* environment variables, which win
    over the built-in defaults.

    Raises:
        ConfigError: If the URL is not an http(s) URL or the timeout is invalid.
    """
    base_url = _sanitize_base_url(api_url or os.getenv(_API_URL_ENV) or DEFAULT_API_URL)
    if not base_url or not base_url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid API URL: {base_url!r} (expected http(s)://...)")

    return ApiConfig(
        base_url=base_url,
        token=token or os.getenv(_TOKEN_ENV) or None,
        timeout=_parse_timeout(timeout if timeout is not None else os.getenv(_TIMEOUT_ENV)),
        full_refresh_on_create=_env_flag(_FULL_REFRESH_ENV),
    )


def log_level_from_env() -> str:
    """Return the logging level name configured through $DOCOPS_LOG_LEVEL."""
    return os.getenv(_LOG_LEVEL_ENV, "").strip().upper() or "WARNING"


def get_client(config: ApiConfig) -> DocDbApiAdapter:
    """
    Create and return a configured API adapter.

    A dedicated requests session is used so connection pooling and the
    authorization header are shared by all calls of one CLI invocation.
    """
    session = requests.Session()
    session.headers["Content-Type"] = "application/json"
    if config.token:
        session.headers["Authorization"] = f"Bearer {config.token}"
    return DocDbApiAdapter(session, base_url=config.base_url, timeout=config.timeout)
