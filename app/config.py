# app/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from app.errors import ConfigError

DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    api_key: str
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Read the service settings from the environment.

    - PDF_API_KEY: shared secret expected in the x-api-key header.
      Left empty, every /generate request is rejected.
    - PORT: listening port (default 3000).
    - LOG_LEVEL: logging level name (default INFO).
    """
    raw_port = os.getenv("PORT", "").strip()
    try:
        port = int(raw_port) if raw_port else DEFAULT_PORT
    except ValueError as exc:
        raise ConfigError(f"PORT must be an integer, got {raw_port!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")

    return Settings(
        api_key=os.getenv("PDF_API_KEY", ""),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
