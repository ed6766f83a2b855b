"""Command line entry point: ``python -m owm_exporter 51.5,-0.1 --units metric``."""

from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from owm_exporter.api import create_app
from owm_exporter.config import ConfigError, load_config
from owm_exporter.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="owm-exporter",
        description="Export OpenWeatherMap readings for one location as JSON and Prometheus metrics.",
    )
    parser.add_argument("coords", nargs="?", help="comma-separated lat/lon coords, e.g. 51.5,-0.1")
    parser.add_argument("-u", "--units", help="unit type, one of: kelvin, metric, imperial [OWM_UNITS]")
    parser.add_argument("-a", "--api-key", help="openweathermap api key [OWM_API_KEY]")
    parser.add_argument("-i", "--interval", type=float, help="refresh interval in seconds [OWM_INTERVAL]")
    parser.add_argument(
        "-b",
        "--backoff-interval",
        type=float,
        help="interval to wait if the previous request failed [OWM_BACKOFF_INTERVAL]",
    )
    parser.add_argument("-p", "--port", type=int, help="port for the http server [OWM_PORT]")
    parser.add_argument(
        "-l", "--location", help="adds a location=<value> label to all exported metrics [OWM_LOCATION]"
    )
    parser.add_argument("--config", help="path to a YAML config file [OWM_CONFIG_PATH]")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = {
        "coords": args.coords,
        "units": args.units,
        "api_key": args.api_key,
        "interval": args.interval,
        "backoff_interval": args.backoff_interval,
        "port": args.port,
        "location": args.location,
    }
    try:
        config = load_config(config_path=args.config, overrides=overrides)
    except ConfigError as exc:
        parser.error(str(exc))

    setup_logging(config.logging, force=True)
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_config=None)


if __name__ == "__main__":
    main()
