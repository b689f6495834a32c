"""CLI entry point for the weather client."""

import argparse
import asyncio
import logging

from nimbus.config.loader import get_config_value, load_config
from nimbus.config.schema import NimbusConfig
from nimbus.core.orchestrator import WeatherOrchestrator
from nimbus.errors import NimbusError
from nimbus.reporting.formatters import (
    format_candidates_text,
    format_saved_text,
    format_state_json,
    format_state_text,
)
from nimbus.storage.database import connect, run_migrations
from nimbus.storage.location_store import LocationStore

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="nimbus",
        description="Weather forecasts with offline cache and saved locations",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # forecast
    fc_p = sub.add_parser("forecast", help="Fetch a live forecast")
    fc_p.add_argument("--lat", type=float, help="Latitude")
    fc_p.add_argument("--lon", type=float, help="Longitude")
    fc_p.add_argument("--city", help="Resolve a place name to coordinates")
    fc_p.add_argument("--name", help="Display name (skips reverse geocoding)")
    fc_p.add_argument("--json", action="store_true", help="JSON output")

    # search
    search_p = sub.add_parser("search", help="Search places by name")
    search_p.add_argument("query", help="Free-text place query")
    search_p.add_argument("--limit", type=int, default=None, help="Max results")

    # show
    show_p = sub.add_parser("show", help="Show the last cached weather (offline)")
    show_p.add_argument("--json", action="store_true", help="JSON output")

    # saved list / saved delete
    saved_p = sub.add_parser("saved", help="Saved location operations")
    saved_sub = saved_p.add_subparsers(dest="saved_command")
    saved_sub.add_parser("list", help="List saved locations, newest first")
    del_p = saved_sub.add_parser("delete", help="Delete a saved location")
    del_p.add_argument("city", help="City name as saved")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    show_cfg_p = config_sub.add_parser("show", help="Display current config")
    show_cfg_p.add_argument(
        "key", nargs="?", help="Dotted key to show, e.g. search.debounce_ms"
    )

    args = parser.parse_args(argv)
    if args.command == "forecast" and (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )

    if args.command == "config":
        return _cmd_config(config, args)

    conn = connect(config.storage.db_path)
    try:
        run_migrations(conn)
        orchestrator = WeatherOrchestrator.from_config(config, LocationStore(conn))
        if args.command == "forecast":
            return _cmd_forecast(orchestrator, args)
        elif args.command == "search":
            return _cmd_search(orchestrator, args)
        elif args.command == "show":
            return _cmd_show(orchestrator, args)
        elif args.command == "saved":
            return _cmd_saved(orchestrator, args)
        else:
            parser.print_help()
            return 1
    finally:
        conn.close()


def _cmd_forecast(orchestrator: WeatherOrchestrator, args) -> int:
    if args.city:
        try:
            place = orchestrator.geocoding.require_by_name(args.city)
        except NimbusError as e:
            print(f"Error: {e}")
            return 1
        lat, lon = place.latitude, place.longitude
        name = args.name or place.display_name
    elif args.lat is not None and args.lon is not None:
        lat, lon, name = args.lat, args.lon, args.name
    else:
        lat = orchestrator.default_latitude
        lon = orchestrator.default_longitude
        name = args.name

    async def _run() -> None:
        orchestrator.load_cached()
        await orchestrator.fetch(lat, lon, name)
        await orchestrator.close()

    asyncio.run(_run())
    state = orchestrator.state
    print(format_state_json(state) if args.json else format_state_text(state))
    return 1 if state.last_error else 0


def _cmd_search(orchestrator: WeatherOrchestrator, args) -> int:
    if args.limit is not None:
        orchestrator.search_limit = args.limit

    async def _run() -> None:
        orchestrator.search(args.query)
        await orchestrator.wait_idle()

    asyncio.run(_run())
    print(format_candidates_text(orchestrator.state.search_results))
    return 0


def _cmd_show(orchestrator: WeatherOrchestrator, args) -> int:
    orchestrator.load_cached()
    state = orchestrator.state
    print(format_state_json(state) if args.json else format_state_text(state))
    return 0


def _cmd_saved(orchestrator: WeatherOrchestrator, args) -> int:
    if args.saved_command == "list":
        orchestrator.load_cached()
        print(format_saved_text(orchestrator.state.saved_locations))
        return 0
    elif args.saved_command == "delete":
        location = orchestrator.store.get(args.city)
        if location is None:
            print(f"Error: no saved location named {args.city!r}")
            return 1

        async def _run() -> None:
            await orchestrator.delete_location(location)

        asyncio.run(_run())
        print(f"Deleted {args.city}")
        return 0
    else:
        print("Use: saved list | saved delete CITY")
        return 1


def _cmd_config(config: NimbusConfig, args) -> int:
    if args.config_command != "show":
        print("Use: config show [KEY]")
        return 1
    if args.key is None:
        print(config.model_dump_json(indent=2))
        return 0
    try:
        value = get_config_value(config, args.key)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        return 1
    if hasattr(value, "model_dump_json"):
        print(value.model_dump_json(indent=2))
    else:
        print(value)
    return 0
