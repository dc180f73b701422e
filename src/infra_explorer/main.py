"""Main entry point for the infrastructure explorer."""

import asyncio
import logging
import sys

import aiohttp

from infra_explorer.adapters.config import AppConfig
from infra_explorer.adapters.terminal import TerminalUnavailableError, curses_terminal
from infra_explorer.adapters.trassenfinder_api import TrassenfinderClient
from infra_explorer.application import ExplorerApp
from infra_explorer.domain.ports import Terminal

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def configure_logging(config: AppConfig) -> None:
    """Configure the root logger from the application configuration."""
    if config.log_file:
        logging.basicConfig(
            level=config.numeric_log_level,
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            filename=config.log_file,
            force=True,
        )
    else:
        logging.basicConfig(
            level=config.numeric_log_level,
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            stream=sys.stderr,
            force=True,
        )


async def run_explorer(config: AppConfig, terminal: Terminal) -> None:
    """Run the explorer on an acquired terminal until the operator quits."""
    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        client = TrassenfinderClient(
            session,
            api_url=config.api_url,
            timeout_seconds=config.api_timeout_seconds,
            stations_path=config.stations_path,
            segments_path=config.segments_path,
            log_requests=config.log_requests,
        )
        app = ExplorerApp(client, terminal, poll_interval_seconds=config.poll_interval_seconds)
        await app.run()


def main(config: AppConfig) -> int:
    """Run the explorer and return the process exit code."""
    configure_logging(config)
    logger.info(f"Exploring infrastructure at {config.api_url}")

    try:
        with curses_terminal() as terminal:
            asyncio.run(run_explorer(config, terminal))
    except TerminalUnavailableError as e:
        logger.error(f"Cannot start the explorer: {e}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED

    return EXIT_OK
