"""Command line interface of the infrastructure explorer."""

import argparse
import sys
from typing import Any

from pydantic import ValidationError

from infra_explorer import __version__
from infra_explorer.adapters.config import DEFAULT_API_URL, AppConfig
from infra_explorer.main import main


def _setup_argparse() -> argparse.ArgumentParser:
    """Set up and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="infra-explorer",
        description="Interactive terminal explorer for railway infrastructure",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  b / 1        show stations (Betriebsstellen)
  s / 2        show segments (Streckensegmente)
  up / down    move the selection (also k / j, PgUp / PgDn, Home / End)
  r            refresh the current view
  q            quit

Every option can also be set as INFRA_EXPLORER_<OPTION> in the environment.
        """,
    )
    parser.add_argument(
        "-a",
        "--api-url",
        help=f"Base URL of the infrastructure API (default: {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        dest="api_timeout_seconds",
        help="Timeout of a single API request in seconds (default: 10)",
    )
    parser.add_argument(
        "--log-level",
        help="Log level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Write logs to this file instead of stderr")
    parser.add_argument(
        "--log-requests",
        action="store_true",
        default=None,
        help="Log every outgoing API request",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the options given on the command line; unset ones stay with the environment."""
    options = {
        "api_url": args.api_url,
        "api_timeout_seconds": args.api_timeout_seconds,
        "log_level": args.log_level,
        "log_file": args.log_file,
        "log_requests": args.log_requests,
    }
    return {key: value for key, value in options.items() if value is not None}


def load_config(argv: list[str] | None = None) -> AppConfig:
    """Parse the command line and build the configuration."""
    parser = _setup_argparse()
    args = parser.parse_args(argv)
    return AppConfig(**_overrides_from_args(args))


def cli_main(argv: list[str] | None = None) -> None:
    """Synchronous entry point for the CLI command."""
    try:
        config = load_config(argv)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(main(config))


if __name__ == "__main__":
    cli_main()
