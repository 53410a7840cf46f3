"""Pydantic v2 configuration schema with strict validation."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from weatherboard.config.defaults import (
    DEFAULT_DB_PATH,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    OWM_BASE_URL,
    OWM_GEO_BASE_URL,
    OWM_ICON_BASE_URL,
)
from weatherboard.models.common import TemperatureUnit


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = OWM_BASE_URL
    geo_base_url: str = OWM_GEO_BASE_URL
    icon_base_url: str = OWM_ICON_BASE_URL
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0.0)


class RefreshConfig(BaseModel):
    model_config = {"extra": "forbid"}

    interval_seconds: int = Field(default=DEFAULT_REFRESH_INTERVAL_SECONDS, ge=1)
    auto_refresh: bool = False


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    unit: TemperatureUnit = TemperatureUnit.CELSIUS
    timezone: str | None = None  # None = local time

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = DEFAULT_DB_PATH


class DashboardConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    refresh: RefreshConfig = RefreshConfig()
    display: DisplayConfig = DisplayConfig()
    storage: StorageConfig = StorageConfig()
    cities: list[str] = []  # seed list, used only when nothing is stored yet
