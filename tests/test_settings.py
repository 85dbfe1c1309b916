from __future__ import annotations

import pytest

from settings import DEFAULT_CORS_ORIGINS, get_settings

ENV_KEYS = (
    "STORAGE_BACKEND",
    "DATA_DIR",
    "CORS_ALLOWED_ORIGINS",
    "LOG_LEVEL",
    "DEBUG_LOG_REQUESTS",
    "CLIENT_MAX_RETRIES",
    "CLIENT_BASE_DELAY",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = get_settings()
    assert s.storage_backend == "memory"
    assert s.data_dir is None
    assert s.cors_allowed_origins == DEFAULT_CORS_ORIGINS
    assert s.log_level == "INFO"
    assert s.debug_log_requests is False
    assert s.client_max_retries == 3
    assert s.client_base_delay == pytest.approx(0.1)


def test_overrides(clean_env):
    clean_env.setenv("STORAGE_BACKEND", " Disk ")
    clean_env.setenv("DATA_DIR", "/srv/docs")
    clean_env.setenv("CORS_ALLOWED_ORIGINS", "https://app.example.com/, http://localhost:8080")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("DEBUG_LOG_REQUESTS", "yes")
    clean_env.setenv("CLIENT_MAX_RETRIES", "5")
    clean_env.setenv("CLIENT_BASE_DELAY", "0.25")

    s = get_settings()
    assert s.storage_backend == "disk"
    assert s.data_dir == "/srv/docs"
    assert s.cors_allowed_origins == ("https://app.example.com", "http://localhost:8080")
    assert s.log_level == "DEBUG"
    assert s.debug_log_requests is True
    assert s.client_max_retries == 5
    assert s.client_base_delay == pytest.approx(0.25)


def test_settings_are_frozen(clean_env):
    s = get_settings()
    with pytest.raises(Exception):
        s.storage_backend = "disk"  # type: ignore[misc]


@pytest.mark.parametrize("raw", ["verbose", "5", "info!"])
def test_unknown_log_level_is_rejected(clean_env, raw):
    clean_env.setenv("LOG_LEVEL", raw)
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        get_settings()
