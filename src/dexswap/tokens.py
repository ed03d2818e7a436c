"""Token identity validation and decimal lookup.

Addresses are accepted in any casing and normalized to lowercase.
The native asset is addressed by the 0xEeee...EeEe sentinel.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from dexswap.errors import InvalidAmount, InvalidTokenFormat

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")

# Native asset sentinel (used by aggregators for ETH, BNB, MATIC...)
NATIVE_TOKEN = "0x" + "ee" * 20

DEFAULT_DECIMALS = 18

# Common token addresses by chain id (lowercase)
COMMON_TOKENS = {
    1: {
        "ETH": NATIVE_TOKEN,
        "WETH": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
        "USDT": "0xdac17f958d2ee523a2206206994597c13d831ec7",
        "USDC": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
        "DAI": "0x6b175474e89094c44da98b954eedeac495271d0f",
    },
    56: {
        "BNB": NATIVE_TOKEN,
        "WBNB": "0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c",
        # BSC-pegged stablecoins use 18 decimals
        "USDT": "0x55d398326f99059ff775485246999027b3197955",
        "USDC": "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d",
    },
    137: {
        "MATIC": NATIVE_TOKEN,
        "WMATIC": "0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",
        "USDT": "0xc2132d05d31c914a87c6611c10748aeb04b58e8f",
        "USDC": "0x3c499c542cef5e3811e1192ce70d8cc03d5c3359",
    },
}

# Known decimals by chain id. Anything missing falls back to DEFAULT_DECIMALS.
KNOWN_DECIMALS = {
    1: {
        NATIVE_TOKEN: 18,
        COMMON_TOKENS[1]["WETH"]: 18,
        COMMON_TOKENS[1]["USDT"]: 6,
        COMMON_TOKENS[1]["USDC"]: 6,
        COMMON_TOKENS[1]["DAI"]: 18,
    },
    56: {
        NATIVE_TOKEN: 18,
        COMMON_TOKENS[56]["WBNB"]: 18,
        COMMON_TOKENS[56]["USDT"]: 18,
        COMMON_TOKENS[56]["USDC"]: 18,
    },
    137: {
        NATIVE_TOKEN: 18,
        COMMON_TOKENS[137]["WMATIC"]: 18,
        COMMON_TOKENS[137]["USDT"]: 6,
        COMMON_TOKENS[137]["USDC"]: 6,
    },
}


@dataclass(frozen=True)
class TokenRef:
    """A validated, lowercased token identifier."""

    address: str
    decimals: int = DEFAULT_DECIMALS
    symbol: Optional[str] = None

    @property
    def is_native(self) -> bool:
        return self.address == NATIVE_TOKEN

    def __str__(self) -> str:
        return self.symbol or self.address


def validate_address(value: str) -> str:
    """Check a 0x-prefixed 40-hex-digit string and return it lowercased.

    Raises:
        InvalidTokenFormat: empty, wrong length or non-hex input
    """
    if not isinstance(value, str) or not ADDRESS_PATTERN.fullmatch(value):
        raise InvalidTokenFormat(value)
    return value.lower()


def symbol_for(address: str, chain_id: int = 1) -> Optional[str]:
    """Reverse lookup of a common token symbol."""
    for symbol, known in COMMON_TOKENS.get(chain_id, {}).items():
        if known == address:
            return symbol
    return None


def resolve_decimals(address: str, chain_id: int = 1, override: Optional[int] = None) -> int:
    """Decimal precision for a token.

    An explicit override wins. Otherwise the static table is used, and
    unknown tokens are assumed to have 18 decimals. That assumption is a
    heuristic: pass ``override`` for tokens whose precision is known.
    """
    if override is not None:
        if isinstance(override, bool) or not isinstance(override, int) or override < 0:
            raise InvalidAmount(str(override), "token decimals must be a non-negative integer")
        return override

    known = KNOWN_DECIMALS.get(chain_id, {}).get(address.lower())
    if known is not None:
        return known

    logger.debug(f"Unknown token {address} on chain {chain_id}, assuming {DEFAULT_DECIMALS} decimals")
    return DEFAULT_DECIMALS


def validate_token(
    value: str,
    chain_id: int = 1,
    decimals: Optional[int] = None,
) -> TokenRef:
    """Validate a raw token string into a TokenRef.

    Args:
        value: Token address as typed by the user (any casing)
        chain_id: Network used for the decimals lookup
        decimals: Explicit precision, skips the lookup table

    Raises:
        InvalidTokenFormat: If ``value`` is not a well-formed address
        InvalidAmount: If ``decimals`` is not a non-negative integer
    """
    address = validate_address(value)
    return TokenRef(
        address=address,
        decimals=resolve_decimals(address, chain_id, decimals),
        symbol=symbol_for(address, chain_id),
    )
