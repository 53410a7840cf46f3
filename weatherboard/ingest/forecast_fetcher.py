"""Forecast fetcher: reduces the 3-hourly feed to one sample per calendar day."""

import logging
from datetime import date, datetime, tzinfo

from weatherboard.config.defaults import FORECAST_MAX_DAYS
from weatherboard.ingest.openweather_client import OpenWeatherClient
from weatherboard.models.weather import ForecastDay, ForecastSeries

logger = logging.getLogger(__name__)


class ForecastFetcher:
    def __init__(
        self,
        client: OpenWeatherClient,
        tz: tzinfo | None = None,
        max_days: int = FORECAST_MAX_DAYS,
    ):
        self.client = client
        self.tz = tz
        self.max_days = max_days

    async def fetch(self, city: str) -> ForecastSeries | None:
        """Fetch and reduce the forecast for a city, or None if anything fails."""
        try:
            raw = await self.client.get_forecast(city)
            return reduce_daily(raw["list"], tz=self.tz, max_days=self.max_days)
        except Exception:
            logger.exception("Failed to fetch forecast for %s", city)
            return None


def reduce_daily(
    points: list[dict], tz: tzinfo | None = None, max_days: int = FORECAST_MAX_DAYS
) -> ForecastSeries:
    """Keep the first point seen for each calendar date, up to max_days dates.

    Points are walked in feed order and never re-sorted. Dates are computed
    in `tz`, or in local time when tz is None. This is a single snapshot per
    day, not a daily min/max/mean.
    """
    kept: dict[date, ForecastDay] = {}
    for p in points:
        ts = int(p["dt"])
        day = datetime.fromtimestamp(ts, tz).date()
        if day in kept:
            continue
        if len(kept) >= max_days:
            break
        weather = p["weather"][0]
        kept[day] = ForecastDay(
            timestamp=ts,
            day=day,
            temp_c=float(p["main"]["temp"]),
            description=weather.get("description", ""),
            icon=weather.get("icon", ""),
        )
    return list(kept.values())
