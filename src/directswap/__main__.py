"""Command line entry point.

Usage:
    python -m directswap --amount 0.1 --asset-in USDT --asset-out ORN --slippage 0.99

Environment variables (or .env):
    WALLET_SEED_PHRASE: 12/24 word recovery phrase (required)
    RPC_URL: Blockchain JSON-RPC URL
    API_URL: Trading backend base URL
    See directswap.config.Settings for the full list.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

# Load .env file before importing anything else
from dotenv import load_dotenv
load_dotenv()

from pydantic import ValidationError

from directswap.config import Settings
from directswap.errors import SwapPipelineError
from directswap.signing.base import KeyNotFoundError
from directswap.swap.executor import SwapExecutor

logger = logging.getLogger(__name__)

# CLI flag -> settings field
_OVERRIDES = {
    "amount": "amount_in",
    "asset_in": "asset_in",
    "asset_out": "asset_out",
    "asset_in_decimals": "asset_in_decimals",
    "slippage": "slippage_tolerance",
    "decimals": "decimals",
    "rpc_url": "rpc_url",
    "api_url": "api_url",
    "gas_limit": "swap_gas_limit",
    "timeout": "confirmation_timeout",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="directswap",
        description="Swap a token through the trading backend's pools",
    )
    parser.add_argument("--amount", help="Amount of the input asset to swap (default: AMOUNT_IN)")
    parser.add_argument("--asset-in", help="Input asset symbol (default: ASSET_IN)")
    parser.add_argument("--asset-out", help="Output asset symbol (default: ASSET_OUT)")
    parser.add_argument(
        "--asset-in-decimals",
        type=int,
        help="Native decimals of the input asset, used for the approval",
    )
    parser.add_argument(
        "--slippage",
        help="Fraction of the quoted output accepted as minimum, e.g. 0.99",
    )
    parser.add_argument("--decimals", type=int, help="Fixed-point precision of the swap request")
    parser.add_argument("--rpc-url", help="Blockchain JSON-RPC URL")
    parser.add_argument("--api-url", help="Trading backend base URL")
    parser.add_argument("--gas-limit", type=int, help="Swap transaction gas limit")
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for confirmation (0 = wait forever)",
    )
    parser.add_argument(
        "--wait-approval",
        action="store_true",
        help="Wait for the approval to be mined before swapping",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build settings from environment, overridden by explicit CLI flags."""
    overrides = {
        field: getattr(args, flag)
        for flag, field in _OVERRIDES.items()
        if getattr(args, flag, None) is not None
    }
    if args.wait_approval:
        overrides["wait_for_approval"] = True
    if args.debug:
        overrides["debug"] = True
    return Settings(**overrides)


def configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # web3/urllib3 request logs are noise at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def run(settings: Settings) -> int:
    executor = SwapExecutor(settings=settings)
    try:
        result = await executor.execute()
    except KeyNotFoundError as e:
        logger.error(f"Wallet not configured: {e}")
        return 2
    except SwapPipelineError as e:
        logger.error(f"Swap failed at {e.stage}: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        configure_logging(args.debug)
        logger.error(f"Invalid configuration: {e}")
        return 2

    configure_logging(settings.debug)
    logger.info(f"Configuration: {settings.get_safe_dict()}")

    try:
        return asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 130


if __name__ == "__main__":
    sys.exit(main())
