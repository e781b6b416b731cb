"""
Tests for configuration loading.
"""

import json

import pytest  # type: ignore

from src.groundwater_eda.core import Config, constants

ENV_VARS = ["SUPABASE_URL", "SUPABASE_ANON_KEY", "CACHE_DIR", "LOG_LEVEL", "ENVIRONMENT", "CONFIG_FILE"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestConfig:
    """Test cases for Config."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(str(tmp_path / "absent.json"))

    def test_missing_anon_key(self, tmp_path):
        path = write_config(tmp_path, {"api": {"base_url": "https://example.supabase.co"}})

        with pytest.raises(ValueError, match="api.anon_key"):
            Config(path)

    def test_missing_api_section(self, tmp_path):
        with pytest.raises(ValueError):
            Config(write_config(tmp_path, {}))

    def test_credentials_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "env-key")

        config = Config(write_config(tmp_path, {}))

        assert config.api_base_url == "https://env.supabase.co"
        assert config.api_anon_key == "env-key"

    def test_environment_overrides_file(self, config_file, monkeypatch, tmp_path):
        monkeypatch.setenv("CACHE_DIR", str(tmp_path / "other"))
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("ENVIRONMENT", "production")

        config = Config(str(config_file))

        assert config.cache_directory == tmp_path / "other"
        assert config.log_level == "WARNING"
        assert config.get("environment") == "production"

    def test_defaults(self, tmp_path):
        config = Config(write_config(tmp_path, {"api": {"base_url": "u", "anon_key": "k"}}))

        assert config.api_schema == "public"
        assert config.api_timeout == 30
        assert config.api_max_retries == 0
        assert config.page_size == constants.DEFAULT_PAGE_SIZE
        assert config.cache_enabled is True
        assert config.points_max_age_ms == 24 * 60 * 60 * 1000
        assert config.regions_max_age_ms == 7 * 24 * 60 * 60 * 1000
        assert config.timezone == "Europe/Lisbon"
        assert config.source_crs == constants.LEGACY_GRID_CRS
        assert config.cache_file.name == "eda_cache.json"

    def test_max_age_overrides(self, tmp_path):
        config = Config(write_config(tmp_path, {
            "api": {"base_url": "u", "anon_key": "k"},
            "cache": {"points_max_age_hours": 1, "regions_max_age_days": 0.5},
        }))

        assert config.points_max_age_ms == 3_600_000
        assert config.regions_max_age_ms == 43_200_000

    def test_invalid_page_size(self, tmp_path):
        path = write_config(tmp_path, {"api": {"base_url": "u", "anon_key": "k", "page_size": 0}})

        with pytest.raises(ValueError, match="page_size"):
            Config(path)

    def test_dot_notation_get(self, config_file):
        config = Config(str(config_file))

        assert config.get("api.timeout") == 5
        assert config.get("api.missing", "fallback") == "fallback"
        assert config.get("api.timeout.nested", "fallback") == "fallback"
