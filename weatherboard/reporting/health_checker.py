"""Health checker: DB connectivity and upstream API reachability."""

import sqlite3

import httpx

from weatherboard.config.schema import DashboardConfig
from weatherboard.models.reporting import HealthStatus
from weatherboard.storage import city_repo


class HealthChecker:
    def __init__(self, conn: sqlite3.Connection, config: DashboardConfig):
        self.conn = conn
        self.config = config

    def check(self) -> HealthStatus:
        db_ok = self._check_db()
        return HealthStatus(
            db_connected=db_ok,
            weather_api_reachable=self._reachable(self.config.api.base_url + "/weather"),
            geocode_api_reachable=self._reachable(self.config.api.geo_base_url + "/direct"),
            api_key_configured=bool(self.config.api.api_key),
            tracked_cities=len(city_repo.load_cities(self.conn) or []) if db_ok else 0,
        )

    def _check_db(self) -> bool:
        try:
            self.conn.execute("SELECT 1")
            return True
        except sqlite3.Error:
            return False

    def _reachable(self, url: str) -> bool:
        # Any HTTP answer counts; 401 without a key still proves the host is up
        try:
            resp = httpx.get(url, timeout=self.config.api.timeout_seconds)
            return resp.status_code < 500
        except httpx.HTTPError:
            return False
