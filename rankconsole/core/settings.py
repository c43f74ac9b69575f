from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_API_BASE = "http://127.0.0.1:8000"
DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"]


@dataclass(slots=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    api_timeout: float = 30.0
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    locale: str = "zh"
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Read the console configuration from the environment."""

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    return Settings(
        api_base=(os.getenv("RANKING_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
        api_timeout=_float_env("RANKING_API_TIMEOUT", 30.0),
        cors_origins=origins or list(DEFAULT_ORIGINS),
        locale=os.getenv("CONSOLE_LOCALE") or "zh",
        log_level=(os.getenv("CONSOLE_LOG_LEVEL") or "INFO").upper(),
    )
