"""OpenWeatherMap current-conditions and forecast models."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from weatherboard.models.common import CityName


@dataclass(frozen=True)
class CurrentConditions:
    city: CityName
    temp_c: float
    humidity: int  # %
    wind_speed: float  # m/s
    pressure: int  # hPa
    description: str
    icon: str
    observed_at: int  # epoch seconds


@dataclass(frozen=True)
class ForecastDay:
    timestamp: int  # epoch seconds of the sample kept for this day
    day: date
    temp_c: float
    description: str
    icon: str


ForecastSeries = list[ForecastDay]


@dataclass
class AggregationResult:
    """Outcome of one refresh cycle.

    A city mapped to None was fetched and failed; a city missing from a
    mapping was not fetched at all.
    """

    current: dict[CityName, CurrentConditions | None] = field(default_factory=dict)
    forecasts: dict[CityName, ForecastSeries | None] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    error_cities: dict[str, CityName] = field(default_factory=dict)  # message -> city
    duration_seconds: float = 0.0

    def add_error(self, city: CityName, message: str) -> None:
        self.errors.append(message)
        self.error_cities[message] = city

    def without(self, city: CityName) -> "AggregationResult":
        """Copy of this result with every entry and message for `city` purged."""
        return self._filtered(lambda c: c != city)

    def restricted_to(self, cities: list[CityName] | tuple[CityName, ...]) -> "AggregationResult":
        """Copy keeping only entries and messages for the given cities."""
        keep = set(cities)
        return self._filtered(lambda c: c in keep)

    def _filtered(self, keep: Callable[[CityName], bool]) -> "AggregationResult":
        # Messages with no recorded city are not attributable and always kept
        errors = [
            e for e in self.errors
            if e not in self.error_cities or keep(self.error_cities[e])
        ]
        return AggregationResult(
            current={k: v for k, v in self.current.items() if keep(k)},
            forecasts={k: v for k, v in self.forecasts.items() if keep(k)},
            errors=errors,
            error_cities={e: c for e, c in self.error_cities.items() if keep(c)},
            duration_seconds=self.duration_seconds,
        )
