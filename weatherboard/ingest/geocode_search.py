"""City-name autocomplete backed by the geocoding endpoint."""

import logging

from weatherboard.config.defaults import SEARCH_MAX_SUGGESTIONS, SEARCH_MIN_QUERY_LENGTH
from weatherboard.ingest.openweather_client import OpenWeatherClient

logger = logging.getLogger(__name__)


class GeocodeSearch:
    """Best-effort suggestions: never raises, an upstream fault yields []."""

    def __init__(
        self,
        client: OpenWeatherClient,
        min_query_length: int = SEARCH_MIN_QUERY_LENGTH,
        max_suggestions: int = SEARCH_MAX_SUGGESTIONS,
    ):
        self.client = client
        self.min_query_length = min_query_length
        self.max_suggestions = max_suggestions

    async def search(self, query: str) -> list[str]:
        query = (query or "").strip()
        if len(query) < self.min_query_length:
            return []

        try:
            matches = await self.client.geocode(query, limit=self.max_suggestions)
            return [
                f"{m['name']}, {m['country']}"
                for m in matches[: self.max_suggestions]
            ]
        except Exception as e:
            logger.warning("City search failed for %r: %s", query, e)
            return []
