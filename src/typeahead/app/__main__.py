"""Run typeahead queries against the users API from the command line.

Usage:
    python -m typeahead.app lea graham --ttl 10
"""

import argparse
import asyncio
from typing import List, Optional

from typeahead.api.client import ApiClient
from typeahead.api.users import UsersApi
from typeahead.config.settings import settings
from typeahead.core.logging import get_logger, setup_logging
from typeahead.search.service import SearchBox

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="typeahead", description=__doc__.splitlines()[0])
    parser.add_argument("queries", nargs="+", help="Text typed into the search box")
    parser.add_argument("--ttl", type=float, default=settings.search.cache_ttl, help="Cache TTL (s)")
    parser.add_argument(
        "--delay", type=float, default=settings.search.debounce_delay, help="Debounce delay (s)"
    )
    parser.add_argument("--base-url", default=settings.api.base_url, help="Listing API base URL")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    async with ApiClient(base_url=args.base_url) as client:
        box = SearchBox(UsersApi(client).get_users, ttl=args.ttl, delay=args.delay)
        for query in args.queries:
            box.type(query)
            suggestions = await box.settle()
            print(f"{query!r}: " + (", ".join(u.name for u in suggestions) or "(no matches)"))
        logger.info(f"cache stats {box.cache.stats.snapshot()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging(settings.log_level)
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    raise SystemExit(main())
