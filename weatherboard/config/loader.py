"""YAML config loader with environment overrides."""

import os
from pathlib import Path

import yaml

from weatherboard.config.defaults import API_KEY_ENV_VAR
from weatherboard.config.schema import DashboardConfig


def load_config(path: str | Path | None = None) -> DashboardConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. The API key from the
    OPENWEATHER_API_KEY environment variable wins over the YAML value.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    env_key = os.environ.get(API_KEY_ENV_VAR)
    if env_key:
        raw.setdefault("api", {})
        raw["api"]["api_key"] = env_key

    return DashboardConfig(**raw)


def redacted_dump(config: DashboardConfig) -> str:
    """JSON dump of the config with the API key masked."""
    data = config.model_copy(deep=True)
    if data.api.api_key:
        data.api.api_key = data.api.api_key[:4] + "****"
    return data.model_dump_json(indent=2)
