#!/usr/bin/env python3
"""
Run one news aggregation pass from the command line.

Uses the same configuration (.env / environment) as the API server.
Exits with status 1 when the article store is unavailable.
"""
import asyncio
import logging
import sys

from ainews.config import config, state
from ainews.exceptions import StorageUnavailableError
from ainews.server import init_state

logger = logging.getLogger("aggregate_news")


async def run() -> int:
    try:
        init_state()
        result = await state.aggregator.aggregate_news()
    except StorageUnavailableError as e:
        logger.error(f"Article store unavailable: {e}")
        return 1

    print(f"Fetched: {result.total}  New: {result.new}  Errors: {result.errors}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run()))
