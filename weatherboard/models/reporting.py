"""Operational health models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    db_connected: bool
    weather_api_reachable: bool
    geocode_api_reachable: bool
    api_key_configured: bool
    tracked_cities: int
