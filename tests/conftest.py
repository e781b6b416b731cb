"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest
import json

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    """Fixed clock that tests advance explicitly."""
    return FakeClock()


@pytest.fixture
def config_file(tmp_path):
    """Write a minimal valid configuration file and return its path."""
    data = {
        "api": {
            "base_url": "https://example.supabase.co",
            "anon_key": "test-key",
            "timeout": 5,
        },
        "cache": {
            "directory": str(tmp_path / "cache"),
        },
        "processing": {
            "timezone": "UTC",
        },
        "logging": {
            "level": "DEBUG",
            "file": str(tmp_path / "logs" / "test.log"),
        },
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring API access"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
