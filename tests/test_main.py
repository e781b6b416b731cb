"""
Command-line entry point tests.

The backend fetcher is patched so no network access is needed.
"""

import json
from unittest.mock import patch

import pytest  # type: ignore
import requests  # type: ignore

from src.groundwater_eda.main import GroundwaterEDAApp, main


ROWS = [
    {"id": 1, "data": "2020-01-01", "coord_x_m": -9.1, "coord_y_m": 38.7,
     "codigo": "A", "sistema_aquifero": "Tejo"},
    {"id": 2, "data": "2019-06-01", "coord_x_m": -9.1, "coord_y_m": 38.7,
     "codigo": "A", "sistema_aquifero": "Tejo"},
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ["SUPABASE_URL", "SUPABASE_ANON_KEY", "CACHE_DIR", "LOG_LEVEL", "ENVIRONMENT"]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fetcher():
    with patch("src.groundwater_eda.main.DataFetcher") as mock_cls:
        instance = mock_cls.return_value
        instance.fetch_variable_data.return_value = list(ROWS)
        yield instance


class TestMain:
    """Test cases for the CLI."""

    def test_points_prints_summary(self, config_file, fetcher, capsys):
        code = main(["--config", str(config_file), "points", "nitrato"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output == [{
            "code": "A",
            "lat": 38.7,
            "lon": -9.1,
            "first": "01/06/2019",
            "last": "01/01/2020",
            "count": 2,
        }]

    def test_points_are_cached_between_runs(self, config_file, fetcher, capsys):
        main(["--config", str(config_file), "points", "nitrato"])
        main(["--config", str(config_file), "points", "nitrato"])

        assert fetcher.fetch_variable_data.call_count == 1

    def test_transport_error(self, config_file, fetcher, capsys):
        fetcher.fetch_variable_data.side_effect = requests.exceptions.ConnectionError("down")

        assert main(["--config", str(config_file), "points", "nitrato"]) == 1
        assert "Failed to load data" in capsys.readouterr().out

    def test_missing_config(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "absent.json"), "schema"]) == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_regions(self, config_file, fetcher, capsys):
        fetcher.fetch_distinct_regions.return_value = ["Tejo", "Sado"]

        assert main(["--config", str(config_file), "regions", "nitrato"]) == 0
        assert json.loads(capsys.readouterr().out) == ["Sado", "Tejo"]

    def test_clear_cache(self, config_file, fetcher, capsys):
        main(["--config", str(config_file), "points", "nitrato"])

        assert main(["--config", str(config_file), "clear-cache"]) == 0
        main(["--config", str(config_file), "points", "nitrato"])

        assert fetcher.fetch_variable_data.call_count == 2


class TestGroundwaterEDAApp:
    """Test cases for the application facade."""

    def test_points_filtered_by_code(self, config_file, fetcher):
        app = GroundwaterEDAApp(str(config_file))
        try:
            assert app.points("nitrato", code="Z") == []
            assert len(app.points("nitrato", code="A")) == 1
        finally:
            app.close()

    def test_history(self, config_file, fetcher):
        fetcher.fetch_history.return_value = [{"codigo": "A", "data": "2020-01-01"}]
        app = GroundwaterEDAApp(str(config_file))
        try:
            assert app.history("nitrato", "A") == [{"codigo": "A", "data": "2020-01-01"}]
        finally:
            app.close()
