"""Aggregation pipeline: concurrent weather + forecast fan-out for all tracked cities."""

import asyncio
import logging
import time
from collections.abc import Sequence

from weatherboard.ingest.forecast_fetcher import ForecastFetcher
from weatherboard.ingest.weather_fetcher import WeatherFetcher
from weatherboard.models.weather import AggregationResult

logger = logging.getLogger(__name__)

BATCH_FAILURE_MESSAGE = "Failed to fetch weather data"


class BatchRefreshError(Exception):
    """The refresh cycle as a whole failed; no result was produced."""

    def __init__(self, message: str = BATCH_FAILURE_MESSAGE):
        super().__init__(message)


def weather_error(city: str) -> str:
    return f"Failed to fetch weather for {city}"


def forecast_error(city: str) -> str:
    return f"Failed to fetch forecast for {city}"


class AggregationPipeline:
    def __init__(self, weather: WeatherFetcher, forecast: ForecastFetcher):
        self.weather = weather
        self.forecast = forecast

    async def refresh(self, cities: Sequence[str]) -> AggregationResult:
        """Run one refresh cycle over `cities`.

        Launches every weather and forecast call at once and waits for all of
        them. A failed city maps to None and adds a message to `errors`
        without affecting the others. Anything escaping the fetchers is
        raised as BatchRefreshError.
        """
        cities = list(cities)
        start = time.monotonic()

        try:
            results = await asyncio.gather(
                *(self.weather.fetch(c) for c in cities),
                *(self.forecast.fetch(c) for c in cities),
            )
        except Exception as e:
            logger.exception("Refresh cycle failed for %d cities", len(cities))
            raise BatchRefreshError() from e

        n = len(cities)
        weather_results, forecast_results = results[:n], results[n:]

        result = AggregationResult()
        for city, current in zip(cities, weather_results):
            result.current[city] = current
            if current is None:
                result.add_error(city, weather_error(city))
        for city, series in zip(cities, forecast_results):
            result.forecasts[city] = series
            if series is None:
                result.add_error(city, forecast_error(city))

        result.duration_seconds = time.monotonic() - start
        logger.info(
            "Refreshed %d cities in %.2fs (%d errors)",
            n, result.duration_seconds, len(result.errors),
        )
        return result
