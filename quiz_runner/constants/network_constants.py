"""Network configuration constants for the quiz application."""

from __future__ import annotations

import os

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_API_BASE_URL: str = "http://localhost:3000"
API_BASE_URL_ENV_VAR: str = "QUIZ_API_URL"
REQUEST_TIMEOUT_SECONDS: float = 15.0


def resolve_api_base_url() -> str:
    """Return the question source base URL, honouring the environment override."""
    return os.environ.get(API_BASE_URL_ENV_VAR) or DEFAULT_API_BASE_URL
