"""
Configuration module for the groundwater EDA pipeline.

Loads configuration from JSON file and environment variables.
"""

import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = {}
        self._load_config()
        self._override_from_env()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            self.config = json.load(f)

    def _set(self, section: str, key: str, value: Any) -> None:
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        # Backend
        if os.getenv("SUPABASE_URL"):
            self._set("api", "base_url", os.getenv("SUPABASE_URL"))

        if os.getenv("SUPABASE_ANON_KEY"):
            self._set("api", "anon_key", os.getenv("SUPABASE_ANON_KEY"))

        # Cache
        if os.getenv("CACHE_DIR"):
            self._set("cache", "directory", os.getenv("CACHE_DIR"))

        # Logging
        if os.getenv("LOG_LEVEL"):
            self._set("logging", "level", os.getenv("LOG_LEVEL"))

        # Environment
        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

    def _validate_config(self) -> None:
        """Validate that required configuration keys are present."""
        required_config = {
            "api": ["base_url", "anon_key"],
        }

        missing_sections = [
            section for section in required_config.keys()
            if section not in self.config
        ]
        if missing_sections:
            raise ValueError(
                f"Missing required configuration sections: {', '.join(missing_sections)}"
            )

        missing_keys = []
        for section, keys in required_config.items():
            for key in keys:
                if not self.config[section].get(key):
                    missing_keys.append(f"{section}.{key}")

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}. "
                "Set them in the config file or via SUPABASE_URL / SUPABASE_ANON_KEY."
            )

        if self.page_size < 1:
            raise ValueError(f"api.page_size must be positive, got {self.page_size}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'api.base_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def api_base_url(self) -> str:
        """Get backend base URL."""
        return self.get("api.base_url", "")

    @property
    def api_anon_key(self) -> str:
        """Get backend anonymous API key."""
        return self.get("api.anon_key", "")

    @property
    def api_schema(self) -> str:
        """Get database schema exposed by the REST endpoint."""
        return self.get("api.schema", "public")

    @property
    def api_timeout(self) -> int:
        """Get API timeout in seconds."""
        return self.get("api.timeout", 30)

    @property
    def api_max_retries(self) -> int:
        """Get maximum API retry attempts (0 fails fast)."""
        return self.get("api.max_retries", 0)

    @property
    def api_verify_ssl(self) -> bool:
        """Get API SSL verification setting."""
        return self.get("api.verify_ssl", True)

    @property
    def page_size(self) -> int:
        """Get rows requested per page."""
        return int(self.get("api.page_size", constants.DEFAULT_PAGE_SIZE))

    @property
    def cache_enabled(self) -> bool:
        """Check if the persistent cache tier is enabled."""
        return self.get("cache.enabled", True)

    @property
    def cache_directory(self) -> Path:
        """Get persistent cache directory."""
        return Path(self.get("cache.directory", ".cache"))

    @property
    def cache_file(self) -> Path:
        """Get persistent cache file path."""
        return self.cache_directory / self.get("cache.file", "eda_cache.json")

    @property
    def cache_max_bytes(self) -> int:
        """Get persistent cache capacity in bytes."""
        return self.get("cache.max_bytes", constants.DEFAULT_CACHE_MAX_BYTES)

    @property
    def points_max_age_ms(self) -> int:
        """Get max age of cached point data in milliseconds."""
        hours = self.get("cache.points_max_age_hours")
        if hours is None:
            return constants.POINTS_MAX_AGE_MS
        return int(float(hours) * constants.HOUR_MS)

    @property
    def regions_max_age_ms(self) -> int:
        """Get max age of cached region lists in milliseconds."""
        days = self.get("cache.regions_max_age_days")
        if days is None:
            return constants.REGIONS_MAX_AGE_MS
        return int(float(days) * constants.DAY_MS)

    @property
    def timezone(self) -> str:
        """Get timezone used for dates without offset."""
        return self.get("processing.timezone", constants.DEFAULT_TIMEZONE)

    @property
    def source_crs(self) -> str:
        """Get the projected reference system of legacy coordinates."""
        return self.get("processing.source_crs", constants.LEGACY_GRID_CRS)

    @property
    def log_level(self) -> str:
        """Get logging level."""
        return self.get("logging.level", "INFO")

    @property
    def log_console_level(self) -> Optional[str]:
        """Get console logging level (None follows the logging level)."""
        return self.get("logging.console_level")

    @property
    def log_library_level(self) -> str:
        """Get level applied to HTTP and projection library loggers."""
        return self.get("logging.library_level", "WARNING")

    @property
    def log_file(self) -> Optional[str]:
        """Get log file path."""
        return self.get("logging.file")

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, env={self.get('environment')})"
