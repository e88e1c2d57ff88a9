"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

# Keys the sample models read; cleared from the live environment per test
SAMPLE_KEYS = (
    "APP_NAME",
    "APP_VERSION",
    "PORT",
    "DEBUG",
    "CACHE_ENABLED",
    "CACHE_TTL",
    "DB_HOST",
    "DB_PORT",
    "DB_PASSWORD",
    "ENVSTRUCT_LOG_LEVEL",
    "ENVSTRUCT_LOG_JSON",
)


@pytest.fixture
def clean_environ(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every key the sample models read from the process environment."""
    for key in SAMPLE_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def nested_app_env() -> dict[str, str]:
    """A snapshot configuring every level of AppConfig."""
    return {
        "APP_NAME": "nested-app",
        "APP_VERSION": "1.0.0",
        "DEBUG": "true",
        "MONITORING_ALERT_THRESHOLD": "95.5",
        "LOG_LEVEL": "info",
        "LOG_FILE_PATH": "/var/log/app.log",
        "LOG_MAX_SIZE": "10485760",
        "METRICS_ENABLED": "true",
        "METRICS_PORT": "9090",
    }


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    """Write a small dotenv file for ServiceConfig."""
    path = tmp_path / ".env"
    path.write_text(
        "# service settings\nAPP_NAME=from-file\nPORT=8080\nEMPTY_DECLARED\n",
        encoding="utf-8",
    )
    return path
