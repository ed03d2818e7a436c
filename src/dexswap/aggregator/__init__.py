"""DEX aggregator clients (quote and calldata only, no signing)."""

from dexswap.aggregator.paraswap import (
    PARASWAP_API,
    ParaSwapClient,
    create_paraswap_client,
)

__all__ = [
    "PARASWAP_API",
    "ParaSwapClient",
    "create_paraswap_client",
]
