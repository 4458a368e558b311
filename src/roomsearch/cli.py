"""Build the room availability index and store it as JSON.

Run with: roomsearch
Quick:    roomsearch --quick              (only a few items per stage)
Output:   roomsearch --output data/index.json

Configuration is read from environment variables / .env, see
roomsearch.config.ScraperConfig.

Exit codes:
  0 = success (index file written)
  1 = error (no index file written or overwritten)
"""

import argparse
import asyncio
import sys

from roomsearch.config import ScraperConfig, get_config
from roomsearch.errors import ScrapingError
from roomsearch.fetcher import Fetcher
from roomsearch.indexer import IndexAssembler
from roomsearch.logging import get_logger, setup_logging
from roomsearch.models import Index
from roomsearch.storage import write_index

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roomsearch",
        description="Scrape the course catalogue and build the free room index.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Stop every scraping stage after a few items (for testing).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: OUTPUT_PATH or index.json).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: LOG_LEVEL or INFO).",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON lines.",
    )
    return parser


async def build_index(config: ScraperConfig, *, quick: bool = False) -> Index:
    async with Fetcher.open(config) as fetcher:
        return await IndexAssembler(fetcher, config, quick=quick).build()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()

    setup_logging(
        json_output=args.json_logs or config.log_json,
        log_level=args.log_level or config.log_level,
    )
    if args.quick:
        log.warning("quick_mode_enabled", limit=config.quick_limit)

    output = args.output or config.output_path
    try:
        index = asyncio.run(build_index(config, quick=args.quick))
        write_index(index, output)
    except (ScrapingError, OSError) as e:
        log.error("run_failed", error=str(e), type=type(e).__name__)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
