from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from flixscrape.infrastructure.config import load_config
from flixscrape.infrastructure.logging.setup import configure_logging
from flixscrape.interfaces.app import create_app

log = structlog.get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

# argparse dests forwarded to load_config; each dest is a flat config key.
_OVERRIDE_DESTS = (
    "upstream_base_url",
    "cache_backend",
    "cache_dir",
    "enrichment_enabled",
    "sources_debug",
    "log_level",
    "log_format",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flixscrape",
        description="Serve the scraped catalog, details and stream sources as JSON.",
    )

    server = parser.add_argument_group("server")
    server.add_argument("--host", help=f"Bind host (env HOST, default {DEFAULT_HOST}).")
    server.add_argument(
        "--port", type=int, help=f"Bind port (env PORT, default {DEFAULT_PORT})."
    )

    files = parser.add_argument_group("config files")
    files.add_argument("--config", type=Path, help="Path to YAML config file.")
    files.add_argument("--dotenv", type=Path, help="Path to .env file.")

    overrides = parser.add_argument_group("overrides")
    overrides.add_argument(
        "--base-url", dest="upstream_base_url", help="Base URL of the scraped site."
    )
    overrides.add_argument(
        "--cache-backend", choices=["memory", "diskcache"], help="TMDB lookup cache."
    )
    overrides.add_argument("--cache-dir", help="Directory for the diskcache backend.")
    overrides.add_argument(
        "--no-enrichment",
        dest="enrichment_enabled",
        action="store_const",
        const=False,
        help="Skip TMDB lookups for listing items.",
    )
    overrides.add_argument(
        "--debug-sources",
        dest="sources_debug",
        action="store_const",
        const=True,
        help="Include the extraction trace in every sources response.",
    )
    overrides.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    overrides.add_argument("--log-format", choices=["json", "console"])
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        dest: value
        for dest in _OVERRIDE_DESTS
        if (value := getattr(args, dest)) is not None
    }


def start(argv: Iterable[str] | None = None) -> None:
    """Process entrypoint: load config once, then build the app with it."""
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else list(argv))

    host = args.host or os.getenv("HOST", DEFAULT_HOST)
    port = args.port or int(os.getenv("PORT", str(DEFAULT_PORT)))

    config = load_config(
        config_path=args.config,
        dotenv_path=args.dotenv,
        cli_overrides=_cli_overrides(args),
    )
    log_config = configure_logging(config)
    log.info("server_starting", host=host, port=port, environment=config.environment)

    uvicorn.run(create_app(config), host=host, port=port, log_config=log_config)


if __name__ == "__main__":
    raise SystemExit(start())
