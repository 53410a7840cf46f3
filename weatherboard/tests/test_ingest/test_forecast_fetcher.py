"""Tests for forecast fetching and first-sample-per-day reduction."""

import asyncio
from datetime import UTC, date, timedelta, timezone
from unittest.mock import MagicMock

import httpx
import respx

from weatherboard.ingest.forecast_fetcher import ForecastFetcher, reduce_daily
from weatherboard.ingest.openweather_client import OpenWeatherClient

BASE = "https://test-owm.example.com/data/2.5"


class TestReduceDaily:
    def test_seven_days_reduced_to_five(self, forecast_points):
        series = reduce_daily(forecast_points(days=7), tz=UTC)
        assert len(series) == 5
        assert [d.day for d in series] == [date(2026, 1, 5 + i) for i in range(5)]
        # First slot of every day was kept
        assert [d.temp_c for d in series] == [0.0, 100.0, 200.0, 300.0, 400.0]

    def test_one_entry_per_day(self, forecast_points):
        series = reduce_daily(forecast_points(days=3), tz=UTC)
        assert len({d.day for d in series}) == len(series) == 3

    def test_fewer_days_than_cap(self, forecast_points):
        assert len(reduce_daily(forecast_points(days=2), tz=UTC)) == 2

    def test_empty_feed(self):
        assert reduce_daily([], tz=UTC) == []

    def test_feed_order_preserved(self, forecast_points):
        # Swap the first two days: no re-sort happens
        points = forecast_points(days=3)
        points = points[8:16] + points[0:8] + points[16:]
        series = reduce_daily(points, tz=UTC)
        assert [d.temp_c for d in series] == [100.0, 0.0, 200.0]

    def test_first_seen_not_earliest(self, forecast_points):
        # Within a day the first point in the feed wins even if a later
        # point has an earlier timestamp
        points = forecast_points(days=1)
        points = [points[3]] + points[:3] + points[4:]
        series = reduce_daily(points, tz=UTC)
        assert series[0].temp_c == 3.0

    def test_timezone_shifts_day_boundaries(self, forecast_points):
        # At UTC-5, 00:00Z and 03:00Z still belong to the previous day
        utc_minus_5 = timezone(timedelta(hours=-5))
        series = reduce_daily(forecast_points(days=2), tz=utc_minus_5)
        assert series[0].day == date(2026, 1, 4)
        assert series[0].temp_c == 0.0
        assert series[1].day == date(2026, 1, 5)
        assert series[1].temp_c == 2.0  # 06:00Z = 01:00 local

    def test_custom_cap(self, forecast_points):
        assert len(reduce_daily(forecast_points(days=7), tz=UTC, max_days=3)) == 3

    def test_keeps_timestamp_of_sample(self, forecast_points):
        points = forecast_points(days=2)
        series = reduce_daily(points, tz=UTC)
        assert series[1].timestamp == points[8]["dt"]


class TestForecastFetcher:
    @respx.mock
    def test_success(self, owm: OpenWeatherClient, load_fixture):
        respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json=load_fixture("owm_forecast_london.json"))
        )

        series = asyncio.run(ForecastFetcher(owm, tz=UTC).fetch("London"))
        assert series is not None
        assert [d.temp_c for d in series] == [6.8, 5.2, 4.1]
        assert [d.description for d in series] == ["light rain", "scattered clouds", "mist"]
        assert series[0].icon == "10d"

    @respx.mock
    def test_not_found_is_none(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/forecast").mock(return_value=httpx.Response(404))
        assert asyncio.run(ForecastFetcher(owm).fetch("Atlantis")) is None

    @respx.mock
    def test_missing_list_is_none(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json={"cod": "200"})
        )
        assert asyncio.run(ForecastFetcher(owm).fetch("London")) is None

    def test_api_error(self):
        client = MagicMock(spec=OpenWeatherClient)
        client.get_forecast.side_effect = Exception("OWM down")
        assert asyncio.run(ForecastFetcher(client).fetch("London")) is None
