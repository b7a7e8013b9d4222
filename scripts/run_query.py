#!/usr/bin/env python3
"""
Run an ad-hoc GraphQL query against the configured Shopify store.
Usage: python scripts/run_query.py '<query>'
       python scripts/run_query.py --file query.graphql
"""

import argparse
import asyncio
import sys

from rackbeat_sync.config import load_settings
from rackbeat_sync.errors import SyncClientError
from rackbeat_sync.main import configure_logging
from rackbeat_sync.shopify import ShopifyClient


async def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run a Shopify GraphQL query")
    parser.add_argument("query", nargs="?", help="GraphQL query text")
    parser.add_argument("--file", help="Read the query from a file")
    args = parser.parse_args(argv)
    
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            query = f.read()
    elif args.query:
        query = args.query
    else:
        parser.error("a query or --file is required")
    
    settings = load_settings()
    configure_logging(settings)
    
    async with ShopifyClient.from_settings(settings) as client:
        try:
            print(await client.execute_raw_query(query))
        except SyncClientError as e:
            print(f"Query failed: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
