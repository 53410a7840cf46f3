"""Dashboard session state models."""

from dataclasses import dataclass, field
from enum import StrEnum

from weatherboard.models.common import CityName
from weatherboard.models.weather import CurrentConditions, ForecastSeries


class RefreshState(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    SETTLED = "settled"
    BATCH_FAILED = "batch_failed"


@dataclass(frozen=True)
class DashboardSnapshot:
    cities: tuple[CityName, ...]
    current: dict[CityName, CurrentConditions | None] = field(default_factory=dict)
    forecasts: dict[CityName, ForecastSeries | None] = field(default_factory=dict)
    errors: tuple[str, ...] = ()
    state: RefreshState = RefreshState.IDLE
    refreshed_at: str | None = None
    auto_refresh: bool = False

    @property
    def error(self) -> str:
        """Most recent error message, empty when there is none."""
        return self.errors[-1] if self.errors else ""
