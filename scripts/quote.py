#!/usr/bin/env python3
"""Swap quote script.

Fetches a SELL quote from the aggregator and prints it. With --execute,
builds and broadcasts the swap from the hot wallet in SIGNER_PRIVATE_KEY.

Usage:
    python scripts/quote.py --src ETH --dest USDT --amount 0.1 --trader 0x...

Options:
    --src / --dest  Token symbol (ETH, WETH, USDT, USDC, DAI) or address
    --amount        Amount to sell, in human units
    --trader        Trader address (defaults to the hot wallet address)
    --execute       Build and broadcast the swap
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from dexswap.amounts import from_base_units
from dexswap.config import get_settings
from dexswap.errors import SwapError
from dexswap.pipeline import create_pipeline
from dexswap.signing.local import LocalAccountSigner
from dexswap.tokens import COMMON_TOKENS, resolve_decimals

load_dotenv()

logger = logging.getLogger(__name__)


def resolve_token(value: str, chain_id: int) -> str:
    """Map a known symbol to its address, pass addresses through."""
    return COMMON_TOKENS.get(chain_id, {}).get(value.upper(), value)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Get a DEX aggregator swap quote")
    parser.add_argument("--src", required=True, help="Token to sell (symbol or address)")
    parser.add_argument("--dest", required=True, help="Token to buy (symbol or address)")
    parser.add_argument("--amount", required=True, help="Amount to sell, human units")
    parser.add_argument("--trader", help="Trader address")
    parser.add_argument("--execute", action="store_true", help="Build and broadcast the swap")
    args = parser.parse_args()

    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    signer = None
    if settings.signer_private_key:
        signer = LocalAccountSigner(
            settings.signer_private_key,
            rpc_url=settings.rpc_url,
            chain_id=settings.chain_id,
        )

    trader = args.trader or (signer.address if signer else None)
    if not trader:
        parser.error("--trader is required when SIGNER_PRIVATE_KEY is not set")
    if args.execute and signer is None:
        parser.error("--execute requires SIGNER_PRIVATE_KEY")

    src = resolve_token(args.src, settings.chain_id)
    dest = resolve_token(args.dest, settings.chain_id)

    async with create_pipeline(settings) as pipeline:
        try:
            quote = await pipeline.get_quote(src, dest, args.amount, trader)
            dest_decimals = resolve_decimals(quote.dest_token, settings.chain_id)

            print(f"You sell:     {args.amount} {args.src}")
            print(f"You receive:  {from_base_units(quote.dest_amount, dest_decimals)} {args.dest}")
            print(f"Best route:   {quote.best_exchange or 'N/A'}")
            if quote.gas_cost:
                usd = f" (~${quote.gas_cost_usd})" if quote.gas_cost_usd else ""
                print(f"Estimated gas: {quote.gas_cost}{usd}")

            if args.execute:
                tx_hash = await pipeline.execute_swap(src, dest, args.amount, trader, signer, quote=quote)
                print(f"Swap executed: {tx_hash}")
        except SwapError as e:
            logger.error(f"{type(e).__name__}: {e}")
            return 1
        finally:
            if signer is not None:
                await signer.aclose()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
