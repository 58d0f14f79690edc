"""CLI argument parsing and main entry point.

``msdashboard server`` runs the health watcher with its management API
under Uvicorn.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

import uvicorn

from msdashboard.constants import (
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    SERVER_NAME,
    SERVER_VERSION,
)
from msdashboard.display.logging_config import setup_logging
from msdashboard.errors import ConfigurationError

module_logger = logging.getLogger(__name__)

# Config file search order (first match wins)
_CONFIG_SEARCH_ORDER = ("config.yaml", "config.yml")
_CONFIG_ENV_VAR = "MSDASHBOARD_CONFIG"


def _find_config_file() -> str:
    """Locate the config file in the working directory.

    Falls back to ``CWD/config.yaml`` if nothing exists (loader will error).
    """
    for name in _CONFIG_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return os.path.join(os.getcwd(), "config.yaml")


def resolve_config_path(cli_value: Optional[str]) -> str:
    """Resolve the config path: CLI flag, then env var, then auto-detect."""
    config_path = cli_value or os.environ.get(_CONFIG_ENV_VAR) or _find_config_file()
    return os.path.abspath(config_path)


# ── ``msdashboard server`` ──────────────────────────────────────────────


async def _run_server(
    host: Optional[str],
    port: Optional[int],
    log_lvl_cli: str,
    config_path: Optional[str] = None,
) -> int:
    """Async main for the server subcommand."""
    from msdashboard.config.loader import load_config
    from msdashboard.runtime.service import DashboardService
    from msdashboard.server.app import create_app

    _, cfg_log_lvl = setup_logging(log_lvl_cli)
    module_logger.info(
        "---- %s v%s starting (log level: %s) ----",
        SERVER_NAME,
        SERVER_VERSION,
        cfg_log_lvl,
    )

    cfg_abs_path = resolve_config_path(config_path)
    module_logger.info("Configuration file path resolved to: %s", cfg_abs_path)
    try:
        config = load_config(cfg_abs_path)
    except ConfigurationError as exc:
        module_logger.error("%s", exc)
        print(f"\nError: {exc}\n", file=sys.stderr)
        return 1

    bind_host = host or config.server.host
    bind_port = port or config.server.port

    app = create_app(DashboardService(config))
    uvicorn_cfg = uvicorn.Config(
        app=app,
        host=bind_host,
        port=bind_port,
        log_config=None,
        log_level=cfg_log_lvl.lower() if cfg_log_lvl == "DEBUG" else "warning",
    )
    server = uvicorn.Server(uvicorn_cfg)

    module_logger.info("Preparing to start Uvicorn server: http://%s:%s", bind_host, bind_port)
    try:
        await server.serve()
    except (KeyboardInterrupt, SystemExit) as e_exit:
        module_logger.info("Server stopped due to '%s'.", type(e_exit).__name__)
    except Exception as e_serve:
        module_logger.exception("Unexpected error while running Uvicorn server: %s", e_serve)
        raise
    finally:
        module_logger.info("%s has shut down or is shutting down.", SERVER_NAME)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="msdashboard",
        description=f"{SERVER_NAME}: health watching for registered service instances.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {SERVER_VERSION}")
    sub = parser.add_subparsers(dest="command")

    server = sub.add_parser("server", help="Run the health watcher and management API.")
    server.add_argument(
        "--host",
        default=None,
        help=f"Bind host (default: config value or {DEFAULT_HOST}).",
    )
    server.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Bind port (default: config value or {DEFAULT_PORT}).",
    )
    server.add_argument(
        "--config",
        default=None,
        help=f"Path to the YAML config file (env: {_CONFIG_ENV_VAR}).",
    )
    server.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "server":
        parser.print_help()
        return 2

    try:
        return asyncio.run(_run_server(args.host, args.port, args.log_level, args.config))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
