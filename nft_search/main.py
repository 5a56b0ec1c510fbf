#!/usr/bin/env python3
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List

from .core.client.rpc_client import RpcClient
from .core.records import CollectionResult
from .core.search_contract import SearchContract
from .utils.config_manager import ConfigManager, SearchConfig
from .utils.exceptions import NftSearchError
from .utils.logging import setup_logging

LOG = logging.getLogger(__name__)


def parse_args(argv: List[str] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find ERC-721 tokens held by an owner via the search contract"
    )
    parser.add_argument("--config", default=None,
                        help="Path to JSON or YAML configuration file")
    parser.add_argument("--rpc-url", default=None,
                        help="JSON-RPC endpoint URL")
    parser.add_argument("--contract", dest="contract_address", default=None,
                        help="Search contract address")
    parser.add_argument("--owner", default=None,
                        help="Owner address to search for")
    parser.add_argument("--collection", dest="collections", action="append", default=None,
                        help="ERC-721 collection address (repeatable)")
    parser.add_argument("--limit", type=int, default=None,
                        help="Maximum number of tokens to return")
    parser.add_argument("--block", default=None,
                        help="Block tag or number for the call (default: latest)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="RPC request timeout in seconds")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file")
    parser.add_argument("--output", default=None,
                        help="Write results as JSON to this file")
    return parser.parse_args(argv)


def save_results(results: List[CollectionResult], output_file: str) -> None:
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump({
            "total": len(results),
            "results": [result.to_dict() for result in results]
        }, f, indent=2)
    LOG.info(f"Results saved to: {path}")


async def search(config: SearchConfig) -> List[CollectionResult]:
    """Run findByOwner once against the configured endpoint"""
    LOG.info(f"Owner address: {config.owner}")
    LOG.info(f"ERC721 addresses: {config.collections}")
    LOG.info(f"Limit: {config.limit}")

    async with RpcClient(config.rpc_url, timeout=config.timeout) as client:
        contract = SearchContract(client, config.contract_address)
        return await contract.find_by_owner(
            config.collections,
            config.owner,
            config.limit,
            block=config.block
        )


async def main(argv: List[str] = None) -> int:
    """Main execution flow"""
    args = parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    try:
        config = ConfigManager().load(args.config, overrides={
            "rpc_url": args.rpc_url,
            "contract_address": args.contract_address,
            "owner": args.owner,
            "collections": args.collections,
            "limit": args.limit,
            "block": args.block,
            "timeout": args.timeout,
        })
        results = await search(config)
    except NftSearchError as e:
        LOG.error(f"Search failed: {e}")
        return 1

    LOG.info(f"Result count: {len(results)}")
    for index, result in enumerate(results, start=1):
        LOG.info(f"Result #{index}")
        LOG.info(f"  Collection: {result.collection_address} ({result.name})")
        for token in result.tokens:
            LOG.info(f"    Token {token.id}: {token.uri}")

    if args.output:
        save_results(results, args.output)

    return 0


def run() -> None:
    """Console script entry point"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
