#!/usr/bin/env python3
"""Bridge Gas Price Oracle.

Keeps a fresh gas price for the home and foreign chains of a bridge: asks an
HTTP gas price oracle, falls back to the bridge contract's gasPrice() and
keeps the last known value when both are unavailable.

Configure via env vars (see --help); CLI args take precedence.
"""

import argparse
import asyncio
import logging
import os
import sys

from .src.ChainContext import CHAIN_IDS, ChainSettings
from .src.fetchers import OracleGasPriceFetcher
from .src.GasPriceBounds import MAX_GAS_PRICE_GWEI, MIN_GAS_PRICE_GWEI, GasPriceBounds
from .src.GasPriceRefresher import GasPriceRefresher
from .src.GasPriceService import GasPriceService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_chains(chains_str: str | None) -> list[str]:
    """Parse a comma-separated chain list, keeping order and dropping repeats.

    :param chains_str: e.g. "home,foreign".
    :returns: List of chain ids (not validated).
    """
    chains: list[str] = []
    for item in (chains_str or "").split(","):
        item = item.strip().lower()
        if item and item not in chains:
            chains.append(item)
    return chains


async def run(service: GasPriceService, chains: list[str], once: bool) -> None:
    """Run the refresh loops until cancelled, or a single cycle with ``once``."""
    try:
        if once:
            for chain_id in chains:
                service.register(chain_id)
                gas_price = await service.refresh(chain_id)
                logger.info(f"[{chain_id}] Gas price: {gas_price} wei")
        else:
            await asyncio.gather(*(service.start(chain_id) for chain_id in chains))
    finally:
        await service.close()


def main() -> None:
    """Main entry point for the Bridge Gas Price Oracle CLI."""
    parser = argparse.ArgumentParser(
        description="Bridge Gas Price Oracle: oracle gas prices with contract fallback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Track both chains with settings from the environment
  python -m gasprice.main --chains home,foreign

  # Refresh the home chain once and print the result
  python -m gasprice.main --chains home --once -v

Environment variables (PREFIX is HOME or FOREIGN):
  {PREFIX}_RPC_URL, {PREFIX}_BRIDGE_ADDRESS, {PREFIX}_BRIDGE_ABI_PATH,
  {PREFIX}_GAS_PRICE_ORACLE_URL, {PREFIX}_GAS_PRICE_SPEED_TYPE,
  {PREFIX}_GAS_PRICE_UPDATE_INTERVAL (ms), {PREFIX}_GAS_PRICE_FALLBACK (wei),
  CHAINS, GAS_PRICE_MIN, GAS_PRICE_MAX (gwei), ORACLE_FETCH_TIMEOUT (s)
""",
    )

    parser.add_argument(
        "--chains",
        type=str,
        help=f"Comma-separated chains to track ({', '.join(CHAIN_IDS)})",
        default=os.environ.get("CHAINS") or "home,foreign",
    )

    parser.add_argument(
        "--min-gas-price",
        dest="min_gas_price",
        type=float,
        help=f"Lowest oracle gas price accepted, in gwei (default: {MIN_GAS_PRICE_GWEI})",
        default=os.environ.get("GAS_PRICE_MIN") or str(MIN_GAS_PRICE_GWEI),
    )

    parser.add_argument(
        "--max-gas-price",
        dest="max_gas_price",
        type=float,
        help=f"Highest oracle gas price accepted, in gwei (default: {MAX_GAS_PRICE_GWEI})",
        default=os.environ.get("GAS_PRICE_MAX") or str(MAX_GAS_PRICE_GWEI),
    )

    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=float,
        help="Timeout for oracle requests in seconds (default: 10.0)",
        default=os.environ.get("ORACLE_FETCH_TIMEOUT") or "10.0",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Refresh each chain once, log the gas price and exit",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate arguments
    chains = parse_chains(args.chains)
    if not chains:
        parser.error("At least one chain must be specified")

    invalid_chains = [c for c in chains if c not in CHAIN_IDS]
    if invalid_chains:
        parser.error(f"Unknown chains: {invalid_chains}. Available: {', '.join(CHAIN_IDS)}")

    if args.fetch_timeout <= 0:
        parser.error("--fetch-timeout must be positive")

    try:
        bounds = GasPriceBounds(args.min_gas_price, args.max_gas_price)
        settings = {chain_id: ChainSettings.from_env(chain_id) for chain_id in chains}
    except ValueError as e:
        parser.error(str(e))

    # Log configuration
    logger.info("=" * 60)
    logger.info("Bridge Gas Price Oracle")
    logger.info("=" * 60)
    logger.info(f"Chains:            {', '.join(chains)}")
    logger.info(f"Gas Price Bounds:  {bounds.min_gwei} - {bounds.max_gwei} gwei")
    logger.info(f"Fetch Timeout:     {args.fetch_timeout}s")
    for chain_id, chain_settings in settings.items():
        logger.info(
            f"[{chain_id}] Oracle: {chain_settings.oracle_url or 'not configured'} "
            f"({chain_settings.speed_type}), "
            f"Interval: {chain_settings.update_interval}s, "
            f"Fallback: {chain_settings.fallback_gas_price} wei"
        )
    logger.info("=" * 60)

    refresher = GasPriceRefresher(
        oracle_fetcher=OracleGasPriceFetcher(bounds=bounds, timeout=args.fetch_timeout)
    )
    service = GasPriceService(settings, refresher=refresher)

    try:
        asyncio.run(run(service, chains, args.once))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
