"""CLI entry point for the weather dashboard."""

import argparse
import asyncio
import logging

from pydantic import ValidationError

from weatherboard.config.loader import load_config, redacted_dump
from weatherboard.config.schema import DashboardConfig
from weatherboard.ingest.geocode_search import GeocodeSearch
from weatherboard.models.common import TemperatureUnit
from weatherboard.models.dashboard import DashboardSnapshot, RefreshState
from weatherboard.reporting.formatters import format_dashboard_text
from weatherboard.reporting.health_checker import HealthChecker
from weatherboard.service import DashboardService, build_client, build_service
from weatherboard.storage.database import open_database

DEFAULT_CONFIG = "config/weatherboard.yaml"

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherboard",
        description="Multi-city weather dashboard",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")

    sub = parser.add_subparsers(dest="command")

    # cities list / add / remove
    cities_p = sub.add_parser("cities", help="Tracked city operations")
    cities_sub = cities_p.add_subparsers(dest="cities_command")
    cities_sub.add_parser("list", help="List tracked cities")
    add_p = cities_sub.add_parser("add", help="Track a city")
    add_p.add_argument("name")
    rm_p = cities_sub.add_parser("remove", help="Stop tracking a city")
    rm_p.add_argument("name")

    # search
    search_p = sub.add_parser("search", help="Suggest city names")
    search_p.add_argument("query")

    # show / watch
    show_p = sub.add_parser("show", help="Fetch and print all city cards once")
    show_p.add_argument("--fahrenheit", action="store_true", help="Show °F")
    watch_p = sub.add_parser("watch", help="Auto-refresh and print cards until interrupted")
    watch_p.add_argument("--fahrenheit", action="store_true", help="Show °F")
    watch_p.add_argument("--interval", type=int, default=None, help="Seconds between refreshes")

    # serve
    serve_p = sub.add_parser("serve", help="Run the web dashboard backend")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8777)

    # health
    sub.add_parser("health", help="Run health checks")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display effective config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ValidationError as e:
        print(f"Error: invalid config {args.config}:\n{e}")
        return 1
    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )

    if args.command == "cities":
        return _cmd_cities(config, args)
    elif args.command == "search":
        return asyncio.run(_cmd_search(config, args))
    elif args.command == "show":
        return asyncio.run(_cmd_show(config, args))
    elif args.command == "watch":
        return _cmd_watch(config, args)
    elif args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "health":
        return _cmd_health(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _unit(config: DashboardConfig, args) -> TemperatureUnit:
    if getattr(args, "fahrenheit", False):
        return TemperatureUnit.FAHRENHEIT
    return config.display.unit


def _cmd_cities(config: DashboardConfig, args) -> int:
    service = build_service(config)
    try:
        if args.cities_command == "list":
            if not service.cities:
                print("No cities tracked")
            for city in service.cities:
                print(city)
            return 0
        elif args.cities_command == "add":
            if service.add_city(args.name):
                print(f"Added {args.name.strip()}")
            else:
                print(f"Unchanged: {args.name.strip()!r} is empty or already tracked")
            return 0
        elif args.cities_command == "remove":
            if service.remove_city(args.name):
                print(f"Removed {args.name}")
                return 0
            print(f"Not tracked: {args.name}")
            return 1
        else:
            print("Use: cities list | cities add NAME | cities remove NAME")
            return 1
    finally:
        asyncio.run(service.aclose())


async def _cmd_search(config: DashboardConfig, args) -> int:
    async with build_client(config) as client:
        suggestions = await GeocodeSearch(client).search(args.query)
    if not suggestions:
        print("No suggestions")
    for s in suggestions:
        print(s)
    return 0


async def _cmd_show(config: DashboardConfig, args) -> int:
    service = build_service(config)
    try:
        snap = await service.refresh()
    finally:
        await service.aclose()
    print(format_dashboard_text(snap, _unit(config, args), config.display.tzinfo()))
    return 0 if not snap.errors else 1


async def _watch(service: DashboardService, config: DashboardConfig, args) -> None:
    unit = _unit(config, args)
    tz = config.display.tzinfo()

    def _print(snap: DashboardSnapshot) -> None:
        if snap.state in (RefreshState.SETTLED, RefreshState.BATCH_FAILED):
            print(format_dashboard_text(snap, unit, tz))
            print()

    unsubscribe = service.subscribe(_print)
    try:
        await service.refresh()
        service.start_auto_refresh(args.interval)
        await asyncio.Event().wait()
    finally:
        unsubscribe()
        await service.aclose()


def _cmd_watch(config: DashboardConfig, args) -> int:
    service = build_service(config)
    try:
        asyncio.run(_watch(service, config, args))
    except KeyboardInterrupt:
        logger.info("Watch interrupted by keyboard")
    return 0


def _cmd_serve(config: DashboardConfig, args) -> int:
    import uvicorn

    from weatherboard.dashboard import create_app

    service = build_service(config)
    app = create_app(
        service,
        GeocodeSearch(service.client),
        icon_base_url=config.api.icon_base_url,
        default_unit=config.display.unit,
        auto_refresh=config.refresh.auto_refresh,
    )
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _cmd_health(config: DashboardConfig) -> int:
    conn = open_database(config.storage.db_path)
    status = HealthChecker(conn, config).check()
    conn.close()

    print(f"DB: {'OK' if status.db_connected else 'FAIL'}")
    print(f"Weather API: {'OK' if status.weather_api_reachable else 'FAIL'}")
    print(f"Geocoding API: {'OK' if status.geocode_api_reachable else 'FAIL'}")
    print(f"API key: {'configured' if status.api_key_configured else 'MISSING'}")
    print(f"Tracked cities: {status.tracked_cities}")
    ok = status.db_connected and status.weather_api_reachable and status.api_key_configured
    return 0 if ok else 1


def _cmd_config(config: DashboardConfig, args) -> int:
    if args.config_command == "show":
        print(redacted_dump(config))
        return 0
    print("Use: config show")
    return 1
