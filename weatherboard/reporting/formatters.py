"""Output formatters: unit conversion, terminal cards and JSON view payloads."""

import math
from datetime import datetime, tzinfo

from weatherboard.config.defaults import OWM_ICON_BASE_URL
from weatherboard.models.common import TemperatureUnit
from weatherboard.models.dashboard import DashboardSnapshot
from weatherboard.models.weather import CurrentConditions, ForecastSeries


def convert_temp(celsius: float, unit: TemperatureUnit) -> float:
    """Celsius is canonical; Fahrenheit is derived for display only."""
    if unit == TemperatureUnit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    return celsius


def _round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; the dashboard rounds .5 upward
    return math.floor(x + 0.5)


def unit_symbol(unit: TemperatureUnit) -> str:
    return "°F" if unit == TemperatureUnit.FAHRENHEIT else "°C"


def format_temp(celsius: float, unit: TemperatureUnit) -> str:
    return f"{_round_half_up(convert_temp(celsius, unit))}{unit_symbol(unit)}"


def icon_url(icon_code: str, base_url: str = OWM_ICON_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{icon_code}@2x.png"


def format_timestamp(ts: int, tz: tzinfo | None = None) -> str:
    return datetime.fromtimestamp(ts, tz).strftime("%Y-%m-%d %H:%M:%S")


def format_day(ts: int, tz: tzinfo | None = None) -> str:
    """Short day label, e.g. 'Mon, Jan 6'."""
    dt = datetime.fromtimestamp(ts, tz)
    return f"{dt:%a}, {dt:%b} {dt.day}"


def format_city_card(
    city: str,
    current: CurrentConditions | None,
    forecast: ForecastSeries | None,
    unit: TemperatureUnit,
    tz: tzinfo | None = None,
) -> str:
    """Plain text card: current conditions plus the 5-day strip."""
    lines = [f"=== {city} ==="]
    if current is None:
        lines.append("No data available")
        return "\n".join(lines)

    lines += [
        f"{format_temp(current.temp_c, unit)}  {current.description.capitalize()}",
        f"Humidity: {current.humidity}%",
        f"Wind: {current.wind_speed} m/s",
        f"Pressure: {current.pressure} hPa",
        f"Last updated: {format_timestamp(current.observed_at, tz)}",
    ]
    if forecast:
        lines.append("5-Day Forecast:")
        for day in forecast:
            lines.append(
                f"  {format_day(day.timestamp, tz):<12} "
                f"{format_temp(day.temp_c, unit):>6}  {day.description}"
            )
    else:
        lines.append("No forecast available")
    return "\n".join(lines)


def format_dashboard_text(
    snapshot: DashboardSnapshot,
    unit: TemperatureUnit,
    tz: tzinfo | None = None,
) -> str:
    if not snapshot.cities:
        return "No cities tracked. Add one with: weatherboard cities add NAME"
    blocks = []
    if snapshot.error:
        blocks.append(f"Error: {snapshot.error}")
    for city in snapshot.cities:
        blocks.append(
            format_city_card(
                city,
                snapshot.current.get(city),
                snapshot.forecasts.get(city),
                unit,
                tz,
            )
        )
    return "\n\n".join(blocks)


def snapshot_to_dict(
    snapshot: DashboardSnapshot,
    unit: TemperatureUnit,
    icon_base_url: str = OWM_ICON_BASE_URL,
) -> dict:
    """JSON payload for the web view; temperatures converted, icons resolved."""
    cards = []
    for city in snapshot.cities:
        current = snapshot.current.get(city)
        forecast = snapshot.forecasts.get(city)
        card: dict = {"city": city, "current": None, "forecast": None}
        if current is not None:
            card["current"] = {
                "temp": convert_temp(current.temp_c, unit),
                "humidity": current.humidity,
                "wind_speed": current.wind_speed,
                "pressure": current.pressure,
                "description": current.description,
                "icon_url": icon_url(current.icon, icon_base_url),
                "observed_at": current.observed_at,
            }
        if forecast is not None:
            card["forecast"] = [
                {
                    "timestamp": d.timestamp,
                    "date": d.day.isoformat(),
                    "temp": convert_temp(d.temp_c, unit),
                    "description": d.description,
                    "icon_url": icon_url(d.icon, icon_base_url),
                }
                for d in forecast
            ]
        cards.append(card)

    return {
        "unit": unit.value,
        "state": snapshot.state.value,
        "refreshed_at": snapshot.refreshed_at,
        "auto_refresh": snapshot.auto_refresh,
        "error": snapshot.error,
        "errors": list(snapshot.errors),
        "cards": cards,
    }
