"""Shared test fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from weatherboard.config.schema import DashboardConfig
from weatherboard.ingest.openweather_client import OpenWeatherClient

TEST_BASE_URL = "https://test-owm.example.com/data/2.5"
TEST_GEO_BASE_URL = "https://test-owm.example.com/geo/1.0"

# 2026-01-05T00:00:00Z, a Monday
DAY0 = 1767571200


@pytest.fixture(autouse=True)
def _no_env_api_key(monkeypatch):
    """Keep a developer's real key out of config tests."""
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir: Path) -> Callable[[str], dict | list]:
    def _load(name: str):
        with open(fixtures_dir / name) as f:
            return json.load(f)
    return _load


@pytest.fixture
def owm() -> OpenWeatherClient:
    return OpenWeatherClient(
        api_key="test-key",
        base_url=TEST_BASE_URL,
        geo_base_url=TEST_GEO_BASE_URL,
    )


@pytest.fixture
def forecast_points() -> Callable[..., list[dict]]:
    """Build a synthetic 3-hourly forecast feed.

    Point temperatures encode their position: day * 100 + slot, so a test
    can tell which sample of which day was kept.
    """
    def _build(days: int, per_day: int = 8, step_hours: int = 3, start: int = DAY0) -> list[dict]:
        points = []
        for d in range(days):
            for s in range(per_day):
                points.append({
                    "dt": start + d * 86400 + s * step_hours * 3600,
                    "main": {"temp": float(d * 100 + s), "pressure": 1010, "humidity": 80},
                    "weather": [{"description": f"day {d} slot {s}", "icon": "01d"}],
                })
        return points
    return _build


@pytest.fixture
def test_config(tmp_path: Path) -> DashboardConfig:
    return DashboardConfig(
        api={
            "api_key": "test-key",
            "base_url": TEST_BASE_URL,
            "geo_base_url": TEST_GEO_BASE_URL,
        },
        display={"timezone": "UTC"},
        storage={"db_path": str(tmp_path / "test.db")},
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "api": {
            "api_key": "yaml-key",
            "base_url": TEST_BASE_URL,
            "geo_base_url": TEST_GEO_BASE_URL,
        },
        "refresh": {"interval_seconds": 120},
        "display": {"unit": "fahrenheit", "timezone": "UTC"},
        "storage": {"db_path": str(tmp_path / "cli.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
