"""Current-conditions fetcher: one request per city, failures folded to None."""

import logging

from weatherboard.ingest.openweather_client import OpenWeatherClient
from weatherboard.models.weather import CurrentConditions

logger = logging.getLogger(__name__)


class WeatherFetcher:
    def __init__(self, client: OpenWeatherClient):
        self.client = client

    async def fetch(self, city: str) -> CurrentConditions | None:
        """Fetch current conditions for a city, or None if anything fails."""
        try:
            raw = await self.client.get_current(city)
            return parse_current(raw, city)
        except Exception:
            logger.exception("Failed to fetch weather for %s", city)
            return None


def parse_current(raw: dict, city: str) -> CurrentConditions:
    """Normalize an OWM /weather payload. Raises KeyError/TypeError on bad shape."""
    main = raw["main"]
    weather = raw["weather"][0]
    return CurrentConditions(
        city=city,
        temp_c=float(main["temp"]),
        humidity=int(main["humidity"]),
        wind_speed=float(raw.get("wind", {}).get("speed", 0.0)),
        pressure=int(main["pressure"]),
        description=weather.get("description", ""),
        icon=weather.get("icon", ""),
        observed_at=int(raw["dt"]),
    )
