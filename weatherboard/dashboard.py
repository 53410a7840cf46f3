"""Weather Dashboard — FastAPI backend serving city cards, search and controls."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from weatherboard.config.defaults import OWM_ICON_BASE_URL
from weatherboard.ingest.geocode_search import GeocodeSearch
from weatherboard.models.common import TemperatureUnit
from weatherboard.reporting.formatters import snapshot_to_dict
from weatherboard.service import DashboardService


class CityAdd(BaseModel):
    name: str


def create_app(
    service: DashboardService,
    search: GeocodeSearch,
    icon_base_url: str = OWM_ICON_BASE_URL,
    default_unit: TemperatureUnit = TemperatureUnit.CELSIUS,
    auto_refresh: bool = False,
) -> FastAPI:
    """Build the app around one dashboard session.

    Every endpoint touching `service` is a coroutine so the session is only
    read and mutated on the event loop thread.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if service.cities:
            await service.refresh()
        if auto_refresh:
            service.start_auto_refresh()
        yield
        await service.aclose()

    app = FastAPI(title="Weather Dashboard", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Data endpoints ──────────────────────────────────────────────

    @app.get("/api/cities")
    async def get_cities():
        return {"cities": list(service.cities)}

    @app.get("/api/weather")
    async def get_weather(unit: TemperatureUnit = default_unit):
        """Last settled snapshot, temperatures in the requested unit."""
        return snapshot_to_dict(service.snapshot(), unit, icon_base_url)

    @app.get("/api/search")
    async def search_cities(q: str = ""):
        """City suggestions. Upstream faults come back as an empty list."""
        return {"suggestions": await search.search(q)}

    @app.get("/api/health")
    async def get_health():
        snap = service.snapshot()
        return {
            "state": snap.state.value,
            "tracked_cities": len(snap.cities),
            "refreshed_at": snap.refreshed_at,
            "auto_refresh": snap.auto_refresh,
        }

    # ── Mutations ───────────────────────────────────────────────────

    @app.post("/api/cities")
    async def add_city(body: CityAdd, unit: TemperatureUnit = default_unit):
        if not body.name.strip():
            raise HTTPException(422, "City name must not be empty")
        if not service.add_city(body.name):
            return {"status": "no_change", "cities": list(service.cities)}
        snap = await service.refresh()
        return {"status": "added", **snapshot_to_dict(snap, unit, icon_base_url)}

    @app.delete("/api/cities/{name}")
    async def remove_city(name: str):
        if not service.remove_city(name):
            raise HTTPException(404, f"City not tracked: {name}")
        return {"status": "removed", "cities": list(service.cities)}

    @app.post("/api/refresh")
    async def refresh(unit: TemperatureUnit = default_unit):
        snap = await service.refresh()
        return snapshot_to_dict(snap, unit, icon_base_url)

    # ── Controls ────────────────────────────────────────────────────

    @app.post("/api/auto-refresh")
    async def set_auto_refresh(enabled: bool = True):
        if enabled:
            service.start_auto_refresh()
        else:
            service.stop_auto_refresh()
        return {"auto_refresh": service.auto_refresh_running}

    return app
