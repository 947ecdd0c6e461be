"""
Tests for settings loading and validation.
"""

from pathlib import Path

import pytest

from cmakekit.config.settings import (
    Settings,
    default_settings,
    load_settings,
    parse_settings,
)
from cmakekit.core.exceptions import ConfigError
from cmakekit.installer.catalog import DEFAULT_CATALOG_URL


class TestDefaults:
    def test_defaults(self, isolated_cache):
        settings = default_settings()

        assert settings.cache_dir == isolated_cache
        assert settings.catalog == DEFAULT_CATALOG_URL
        assert settings.lock == "none"
        assert settings.lock_timeout == 300
        assert settings.download_timeout == 30
        assert settings.tool_name == "CMake"

    def test_derived_directories(self, tmp_path):
        settings = Settings(cache_dir=tmp_path)

        assert settings.tools_dir == tmp_path / "tools" / "cmake"
        assert settings.downloads_dir == tmp_path / "downloads"
        assert settings.lock_dir == tmp_path / "lock"


class TestParseSettings:
    def test_none_gives_defaults(self, isolated_cache):
        assert parse_settings(None) == default_settings()

    def test_all_keys(self, tmp_path):
        settings = parse_settings(
            {
                "cache_dir": str(tmp_path / "c"),
                "catalog": "catalog.json",
                "lock": "file",
                "lock_timeout": 10,
                "download_timeout": 2.5,
                "tool_name": "cmake-ci",
            }
        )

        assert settings == Settings(
            cache_dir=tmp_path / "c",
            catalog="catalog.json",
            lock="file",
            lock_timeout=10,
            download_timeout=2.5,
            tool_name="cmake-ci",
        )

    def test_cache_dir_expands_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))

        settings = parse_settings({"cache_dir": "~/cmk"})

        assert settings.cache_dir == tmp_path / "cmk"

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="unknown key 'retries'"):
            parse_settings({"retries": 3})

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"lock": "mutex"}, "'lock' must be one of none, file"),
            ({"lock_timeout": "300"}, "'lock_timeout' must be a number"),
            ({"lock_timeout": True}, "'lock_timeout' must be a number"),
            ({"download_timeout": 0}, "'download_timeout' must be positive"),
            ({"tool_name": ""}, "'tool_name' must be a non-empty string"),
            ({"catalog": 42}, "'catalog' must be a non-empty string"),
        ],
    )
    def test_bad_values(self, data, message):
        with pytest.raises(ConfigError, match=message):
            parse_settings(data)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="expected a mapping"):
            parse_settings(["lock", "file"])


class TestLoadSettings:
    def test_load_file(self, tmp_path):
        config = tmp_path / "cmakekit.yaml"
        config.write_text("lock: file\nlock_timeout: 60\n", encoding="utf-8")

        settings = load_settings(config)

        assert settings.lock == "file"
        assert settings.lock_timeout == 60

    def test_empty_file(self, tmp_path, isolated_cache):
        config = tmp_path / "cmakekit.yaml"
        config.write_text("", encoding="utf-8")

        assert load_settings(config) == default_settings()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "cmakekit.yaml"
        config.write_text("lock: [file\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(config)

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "cmakekit.yaml").write_text("tool_name: local\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert load_settings().tool_name == "local"

    def test_no_default_file(self, tmp_path, monkeypatch, isolated_cache):
        monkeypatch.chdir(tmp_path)

        assert load_settings() == default_settings()


class TestOverrides:
    def test_none_values_are_ignored(self, tmp_path):
        settings = Settings(cache_dir=tmp_path, lock="file")

        assert settings.with_overrides(lock=None, catalog=None) is settings

    def test_overrides_replace_file_values(self, tmp_path):
        settings = Settings(cache_dir=tmp_path, lock="file")

        overridden = settings.with_overrides(lock="none", cache_dir=Path(tmp_path / "other"))

        assert overridden.lock == "none"
        assert overridden.cache_dir == tmp_path / "other"
        assert settings.lock == "file"

    def test_overrides_are_validated(self, tmp_path):
        with pytest.raises(ConfigError, match="'lock' must be one of"):
            Settings(cache_dir=tmp_path).with_overrides(lock="mutex")
