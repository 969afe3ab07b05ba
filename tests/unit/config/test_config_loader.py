"""Tests for config schema defaults and the layered loader."""

import json

import pytest
from pydantic import ValidationError

from clipdeck.config.loader import load_config, read_config_file
from clipdeck.config.schema import BackendConfig, Config, SearchMode
from clipdeck.core.errors import ConfigError


def write_config(directory, data) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "config.json").write_text(json.dumps(data), encoding="utf-8")


class TestSchema:
    def test_defaults(self):
        config = Config()

        assert config.backend.url == "http://127.0.0.1:7345"
        assert config.history.max_size == 50
        assert config.history.dedup_window == 5
        assert config.grid.page_rows == 3
        assert config.grid.focus_retries == 1
        assert config.search.debounce_ms == 300
        assert config.search.default_mode == SearchMode.SUBSTRING
        assert config.gifs.limit == 30
        assert config.custom_kaomojis == []

    def test_extra_keys_forbidden(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"history": {"max_size": 10, "colour": "red"}})

    def test_backend_url_normalized(self):
        assert BackendConfig(url="http://localhost:9000/").url == "http://localhost:9000"

    def test_backend_url_must_be_http(self):
        with pytest.raises(ValidationError):
            BackendConfig(url="ws://localhost:9000")

    def test_custom_kaomoji_default_category(self):
        config = Config.model_validate({"custom_kaomojis": [{"text": "(=^.^=)"}]})
        assert config.custom_kaomojis[0].category == "Custom"


class TestLoadConfig:
    def test_no_files_gives_defaults(self, tmp_path):
        config = load_config(cwd=tmp_path / "project", global_dir=tmp_path / "global")
        assert config == Config()

    def test_project_overrides_global(self, tmp_path):
        global_dir = tmp_path / "global"
        project = tmp_path / "project"
        write_config(global_dir, {"grid": {"page_rows": 4, "emoji_columns": 10}})
        write_config(project / ".clipdeck", {"grid": {"page_rows": 6}})

        config = load_config(cwd=project, global_dir=global_dir)

        assert config.grid.page_rows == 6
        assert config.grid.emoji_columns == 10

    def test_lists_replace(self, tmp_path):
        global_dir = tmp_path / "global"
        project = tmp_path / "project"
        write_config(global_dir, {"custom_kaomojis": [{"text": "(o_o)"}]})
        write_config(project / ".clipdeck", {"custom_kaomojis": [{"text": "(^o^)"}]})

        config = load_config(cwd=project, global_dir=global_dir)

        assert [k.text for k in config.custom_kaomojis] == ["(^o^)"]

    def test_invalid_json_raises_config_error(self, tmp_path):
        global_dir = tmp_path / "global"
        global_dir.mkdir()
        (global_dir / "config.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(cwd=tmp_path, global_dir=global_dir)

    def test_validation_failure_names_sources(self, tmp_path):
        global_dir = tmp_path / "global"
        write_config(global_dir, {"search": {"debounce_ms": -5}})

        with pytest.raises(ConfigError, match="validation failed") as exc_info:
            load_config(cwd=tmp_path, global_dir=global_dir)
        assert "global" in exc_info.value.message

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"search": {"default_mode": "regex"}}), encoding="utf-8")

        assert load_config(path).search.default_mode == SearchMode.REGEX

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="File not found"):
            load_config(tmp_path / "missing.json")

    def test_non_object_rejected(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ConfigError, match="Expected object"):
            load_config(path)


class TestReadConfigFile:
    def test_missing_optional_layer(self, tmp_path):
        assert read_config_file(tmp_path / "missing.json", required=False) is None

    def test_empty_and_blank_files(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("  \n\t", encoding="utf-8")
        assert read_config_file(path) == {}

    def test_byte_order_mark_accepted(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('\ufeff{"grid": {"page_rows": 2}}', encoding="utf-8")
        assert read_config_file(path) == {"grid": {"page_rows": 2}}

    def test_scalar_names_type(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('"just a string"', encoding="utf-8")

        with pytest.raises(ConfigError, match="got str"):
            read_config_file(path, required=False)
