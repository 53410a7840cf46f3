"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

CityName: TypeAlias = str


class TemperatureUnit(StrEnum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
