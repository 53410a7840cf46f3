"""OpenWeatherMap API client (current weather, 5-day forecast, geocoding)."""

import logging

import httpx

from weatherboard.config.defaults import (
    DEFAULT_TIMEOUT_SECONDS,
    OWM_BASE_URL,
    OWM_GEO_BASE_URL,
    SEARCH_MAX_SUGGESTIONS,
)

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Thin async wrapper over the OpenWeatherMap HTTP API.

    Every call raises on failure: httpx.HTTPStatusError for a non-success
    status, httpx.RequestError for transport faults and ValueError for a
    body that is not JSON. Folding failures into absent results is the
    job of the fetchers built on top of this client.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = OWM_BASE_URL,
        geo_base_url: str = OWM_GEO_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.geo_base_url = geo_base_url.rstrip("/")
        self.timeout = timeout
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def get_current(self, city: str) -> dict:
        """Fetch current conditions for a city name, metric units."""
        return await self._get_json(
            f"{self.base_url}/weather",
            {"q": city, "units": "metric", "APPID": self.api_key},
        )

    async def get_forecast(self, city: str) -> dict:
        """Fetch the 3-hourly 5-day forecast for a city name, metric units."""
        return await self._get_json(
            f"{self.base_url}/forecast",
            {"q": city, "units": "metric", "APPID": self.api_key},
        )

    async def geocode(self, query: str, limit: int = SEARCH_MAX_SUGGESTIONS) -> list[dict]:
        """Direct geocoding: place-name query to a list of {name, country, ...}."""
        data = await self._get_json(
            f"{self.geo_base_url}/direct",
            {"q": query, "limit": limit, "appid": self.api_key},
        )
        if not isinstance(data, list):
            raise ValueError(f"Expected a list from geocoding, got {type(data).__name__}")
        return data

    async def _get_json(self, url: str, params: dict):
        logger.debug("GET %s q=%r", url, params.get("q"))
        resp = await self._http.get(url, params=params)
        resp.raise_for_status()
        return resp.json()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "OpenWeatherClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
