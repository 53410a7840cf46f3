"""Dashboard service: owns the tracked-city list, the last result and the refresh timer."""

import asyncio
import logging
from collections.abc import Callable

from weatherboard.config.defaults import DEFAULT_REFRESH_INTERVAL_SECONDS
from weatherboard.config.schema import DashboardConfig
from weatherboard.ingest.forecast_fetcher import ForecastFetcher
from weatherboard.ingest.openweather_client import OpenWeatherClient
from weatherboard.ingest.weather_fetcher import WeatherFetcher
from weatherboard.models.common import utc_now_iso
from weatherboard.models.dashboard import DashboardSnapshot, RefreshState
from weatherboard.models.weather import AggregationResult
from weatherboard.pipeline.aggregation import AggregationPipeline, BatchRefreshError
from weatherboard.storage.city_repo import CityStore

logger = logging.getLogger(__name__)

Subscriber = Callable[[DashboardSnapshot], None]


class DashboardService:
    """Single dashboard session.

    `add_city`, `remove_city` and `refresh` are the only mutators. Overlapping
    refresh cycles are allowed and each commits independently, so the last
    cycle to finish wins. A commit only keeps entries for cities that are
    still tracked at commit time.
    """

    def __init__(
        self,
        pipeline: AggregationPipeline,
        store: CityStore | None = None,
        cities: list[str] | None = None,
        refresh_interval: int = DEFAULT_REFRESH_INTERVAL_SECONDS,
        client: OpenWeatherClient | None = None,
    ):
        self.pipeline = pipeline
        self.client = client
        self.store = store
        self.refresh_interval = refresh_interval

        stored = store.load() if store is not None else None
        self._cities: list[str] = []
        for name in stored if stored is not None else (cities or []):
            name = name.strip()
            if name and name not in self._cities:
                self._cities.append(name)

        self._result = AggregationResult()
        self._errors: list[str] = []
        self._state = RefreshState.IDLE
        self._in_flight = 0
        self._refreshed_at: str | None = None
        self._subscribers: list[Subscriber] = []
        self._timer: asyncio.Task | None = None

    # --- Read side ---

    @property
    def cities(self) -> tuple[str, ...]:
        return tuple(self._cities)

    @property
    def auto_refresh_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot(
            cities=tuple(self._cities),
            current=dict(self._result.current),
            forecasts=dict(self._result.forecasts),
            errors=tuple(self._errors),
            state=self._state,
            refreshed_at=self._refreshed_at,
            auto_refresh=self.auto_refresh_running,
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot listener. Returns a function that unregisters it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _publish(self) -> DashboardSnapshot:
        snap = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snap)
            except Exception:
                logger.exception("Snapshot subscriber %r failed", callback)
        return snap

    # --- Mutators ---

    def add_city(self, name: str) -> bool:
        """Track a city. Empty or already-tracked names are a no-op."""
        name = (name or "").strip()
        if not name or name in self._cities:
            return False
        self._cities.append(name)
        self._persist()
        self._errors = []
        logger.info("Tracking %s (%d cities)", name, len(self._cities))
        self._publish()
        return True

    def remove_city(self, name: str) -> bool:
        """Stop tracking a city and purge its entries and error messages."""
        if name not in self._cities:
            return False
        self._cities.remove(name)
        self._errors = [
            e for e in self._errors if self._result.error_cities.get(e) != name
        ]
        self._result = self._result.without(name)
        self._persist()
        logger.info("Stopped tracking %s (%d cities)", name, len(self._cities))
        self._publish()
        return True

    async def refresh(self) -> DashboardSnapshot:
        """Run one full refresh cycle and commit its result.

        A batch-level failure keeps the previously displayed data and records
        a single generic error.
        """
        cities = list(self._cities)
        self._in_flight += 1
        self._state = RefreshState.FETCHING
        self._publish()
        try:
            result = await self.pipeline.refresh(cities)
        except BatchRefreshError as e:
            self._errors = [str(e)]
            outcome = RefreshState.BATCH_FAILED
        else:
            self._result = result.restricted_to(self._cities)
            self._errors = list(self._result.errors)
            self._refreshed_at = utc_now_iso()
            outcome = RefreshState.SETTLED
        finally:
            self._in_flight -= 1

        self._state = outcome if self._in_flight == 0 else RefreshState.FETCHING
        snap = self._publish()
        if self._in_flight == 0:
            self._state = RefreshState.IDLE
        return snap

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self._cities)

    # --- Auto-refresh timer ---

    def start_auto_refresh(self, interval: int | None = None) -> bool:
        """Start the periodic refresh task. Returns False if already running.

        Must be called from inside a running event loop.
        """
        if self.auto_refresh_running:
            return False
        if interval is not None:
            self.refresh_interval = interval
        self._timer = asyncio.get_running_loop().create_task(
            self._auto_refresh_loop(self.refresh_interval)
        )
        logger.info("Auto-refresh started, every %ds", self.refresh_interval)
        return True

    def stop_auto_refresh(self) -> bool:
        """Cancel any pending timer. Returns True if one was running."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        logger.info("Auto-refresh stopped")
        return True

    async def _auto_refresh_loop(self, interval: int) -> None:
        while True:
            await asyncio.sleep(interval)
            if not self._cities:
                continue
            await self.refresh()

    async def aclose(self) -> None:
        """Stop the timer and release the upstream client and store."""
        self.stop_auto_refresh()
        if self.client is not None:
            await self.client.aclose()
        if self.store is not None:
            self.store.close()


def build_service(config: DashboardConfig, store: CityStore | None = None) -> DashboardService:
    """Wire client, fetchers, pipeline and storage from config."""
    client = build_client(config)
    tz = config.display.tzinfo()
    pipeline = AggregationPipeline(
        WeatherFetcher(client),
        ForecastFetcher(client, tz=tz),
    )
    if store is None:
        store = CityStore(config.storage.db_path)
    return DashboardService(
        pipeline,
        store=store,
        cities=config.cities,
        refresh_interval=config.refresh.interval_seconds,
        client=client,
    )


def build_client(config: DashboardConfig) -> OpenWeatherClient:
    if not config.api.api_key:
        logger.warning("No API key configured; upstream calls will be rejected")
    return OpenWeatherClient(
        api_key=config.api.api_key,
        base_url=config.api.base_url,
        geo_base_url=config.api.geo_base_url,
        timeout=config.api.timeout_seconds,
    )
