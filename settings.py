from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CORS_ORIGINS = (
    "http://localhost:8000",
    "http://localhost:8080",
    "http://localhost:3000",
    "http://127.0.0.1:8000",
    "http://127.0.0.1:8080",
    "http://127.0.0.1:3000",
)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip().rstrip("/") for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    # Storage
    storage_backend: str
    data_dir: str | None

    # HTTP
    cors_allowed_origins: tuple[str, ...]

    # Logging / debug
    log_level: str
    debug_log_requests: bool

    # Client retry policy
    client_max_retries: int
    client_base_delay: float


def get_settings() -> Settings:
    # Serverless filesystems are ephemeral; default to the in-memory backend.
    storage_backend = os.getenv("STORAGE_BACKEND", "memory").strip().lower()
    data_dir = os.getenv("DATA_DIR") or None

    cors_allowed_origins = _env_list("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid LOG_LEVEL {log_level!r}; expected one of {', '.join(LOG_LEVELS)}")
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    client_max_retries = _env_int("CLIENT_MAX_RETRIES", 3)
    client_base_delay = _env_float("CLIENT_BASE_DELAY", 0.1)

    return Settings(
        storage_backend=storage_backend,
        data_dir=data_dir,
        cors_allowed_origins=cors_allowed_origins,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
        client_max_retries=client_max_retries,
        client_base_delay=client_base_delay,
    )
