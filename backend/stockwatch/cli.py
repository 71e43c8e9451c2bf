# backend/stockwatch/cli.py
"""
One-shot refresh, outside the API server.

    stockwatch-update                  # every stored company
    stockwatch-update "Apple" "IBM"    # just these
"""
import argparse
import asyncio
import sys

from stockwatch.core.config import settings
from stockwatch.core.errors import StockwatchError
from stockwatch.db import connect_to_mongo, close_mongo_connection
from stockwatch.logger import get_logger
from stockwatch.services.stock_update import build_stock_update

log = get_logger(__name__)


async def _run(companies):
    await connect_to_mongo(settings)
    try:
        return await build_stock_update(settings).run(companies or None)
    finally:
        await close_mongo_connection()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Refresh news, images and prices for companies.")
    parser.add_argument("companies", nargs="*", help="company names (default: all stored companies)")
    args = parser.parse_args(argv)

    try:
        records = asyncio.run(_run(args.companies))
    except StockwatchError as e:
        log.error("update failed: %s", e)
        return 1

    for r in records:
        print(f"{r.company:<30} {r.ticker:<16} articles={len(r.history):<4} prices={len(r.price_history)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
