"""
Tests for configuration loading and logging helpers.
"""

from pathlib import Path

import pytest
import structlog

from adelia.common.config import (
    ServerSettings,
    _coerce_env_value,
    get_settings,
    load_yaml_config,
    merge_configs,
)
from adelia.common.exceptions import ConfigError
from adelia.common.logger import log_scope, truncate_long_values


class TestConfig:
    def test_test_environment_loaded(self) -> None:
        settings = get_settings()
        assert settings.env == "test"
        assert settings.tracking.endpoint == "http://test/api/track"
        assert settings.upload.max_attempts == 2

    def test_merge_is_deep(self) -> None:
        merged = merge_configs(
            {"upload": {"backend": "local", "max_attempts": 3}},
            {"upload": {"max_attempts": 1}},
        )
        assert merged == {"upload": {"backend": "local", "max_attempts": 1}}

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_yaml_config(tmp_path / "nope.yaml") == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("upload: [unclosed")
        with pytest.raises(ConfigError):
            load_yaml_config(path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_yaml_config(path)

    def test_list_fields_from_env(self) -> None:
        value = _coerce_env_value(ServerSettings, "cors_origins", "https://a.example, https://b.example")
        assert value == ["https://a.example", "https://b.example"]
        assert _coerce_env_value(ServerSettings, "port", "9000") == "9000"


class TestLogging:
    def test_long_values_truncated(self) -> None:
        processor = truncate_long_values(10)
        event = processor(None, "info", {"event": "x" * 50, "html": "<p>" * 20, "n": 5})
        assert event["event"] == "x" * 50
        assert event["html"].startswith("<p><p><p><")
        assert event["html"].endswith("(+50 chars)")
        assert event["n"] == 5

    def test_log_scope_unbinds(self) -> None:
        with log_scope(kind="skin"):
            assert structlog.contextvars.get_contextvars()["kind"] == "skin"
        assert "kind" not in structlog.contextvars.get_contextvars()
