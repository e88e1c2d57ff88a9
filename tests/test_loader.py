"""Tests for the public loading entry points."""

import os
from pathlib import Path

import pytest
from sample_models import AppConfig, DatabaseSettings, ServiceConfig

from envstruct import (
    FieldReport,
    MissingVariableError,
    capture_environ,
    describe,
    load,
    load_env_file,
    load_from_map,
)


class TestLoadFromEnviron:
    """Tests for binding against the live process environment."""

    def test_reads_process_environment(self, clean_environ: pytest.MonkeyPatch) -> None:
        """Test that load sees variables set in os.environ."""
        clean_environ.setenv("APP_NAME", "live")
        clean_environ.setenv("PORT", "9000")
        config = load(ServiceConfig)
        assert config.name == "live"
        assert config.port == 9000

    def test_missing_in_process_environment(self, clean_environ: pytest.MonkeyPatch) -> None:
        """Test that a missing variable in os.environ fails the bind."""
        with pytest.raises(MissingVariableError, match="APP_NAME"):
            load(ServiceConfig)

    def test_capture_is_a_snapshot(self, clean_environ: pytest.MonkeyPatch) -> None:
        """Test that the captured environment does not track later changes."""
        clean_environ.setenv("APP_NAME", "before")
        snapshot = capture_environ()
        clean_environ.setenv("APP_NAME", "after")
        assert snapshot["APP_NAME"] == "before"
        with pytest.raises(TypeError):
            snapshot["APP_NAME"] = "mutated"  # type: ignore[index]


class TestLoadFromMap:
    """Tests for binding against caller-supplied mappings."""

    def test_mapping_not_mutated(self) -> None:
        """Test that the caller's mapping is left untouched."""
        snapshot = {"APP_NAME": "svc"}
        load_from_map(ServiceConfig, snapshot)
        assert snapshot == {"APP_NAME": "svc"}

    def test_independent_of_process_environment(
        self, clean_environ: pytest.MonkeyPatch
    ) -> None:
        """Test that the live environment is ignored when a mapping is given."""
        clean_environ.setenv("APP_NAME", "from-environ")
        config = load_from_map(ServiceConfig, {"APP_NAME": "from-map"})
        assert config.name == "from-map"


class TestLoadEnvFile:
    """Tests for binding against dotenv files."""

    def test_file_only(self, env_file: Path, clean_environ: pytest.MonkeyPatch) -> None:
        """Test that the file alone is the snapshot by default."""
        clean_environ.setenv("DEBUG", "true")
        config = load_env_file(ServiceConfig, env_file)
        assert config.name == "from-file"
        assert config.port == 8080
        assert config.debug is False

    def test_layered_over_environ(
        self, env_file: Path, clean_environ: pytest.MonkeyPatch
    ) -> None:
        """Test that file entries win over the environment when layered."""
        clean_environ.setenv("APP_NAME", "from-environ")
        clean_environ.setenv("DEBUG", "1")
        config = load_env_file(ServiceConfig, env_file, override_environ=True)
        assert config.name == "from-file"
        assert config.debug is True

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file is reported clearly."""
        with pytest.raises(FileNotFoundError, match="Env file not found"):
            load_env_file(ServiceConfig, tmp_path / "absent.env")

    def test_environ_untouched(self, env_file: Path, clean_environ: pytest.MonkeyPatch) -> None:
        """Test that reading a file never exports its values."""
        load_env_file(ServiceConfig, env_file)
        assert "APP_NAME" not in os.environ


class TestDescribe:
    """Tests for schema reports."""

    def test_flat_dataclass(self) -> None:
        """Test reports for a flat dataclass."""
        reports = describe(DatabaseSettings)
        assert reports == [
            FieldReport("host", "DB_HOST", "str", True, None),
            FieldReport("port", "DB_PORT", "u16", False, "5432"),
            FieldReport("password", "DB_PASSWORD", "?str", False, "None"),
        ]

    def test_nested_paths(self) -> None:
        """Test that nested records are flattened into dotted paths."""
        reports = {r.path: r for r in describe(AppConfig)}
        assert reports["monitoring.metrics.port"].env_key == "METRICS_PORT"
        assert reports["monitoring.metrics.port"].default == "9090"
        assert reports["monitoring.alert_threshold"].type_name == "f32"
        assert reports["app_name"].required
