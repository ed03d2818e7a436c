"""Typed contracts passed between pipeline stages.

Every model here is frozen: each stage produces a value and hands it on,
nothing is mutated after construction.
"""

from dexswap.contracts.aggregator import (
    AggregatorError,
    decode_rate_response,
    decode_transaction_response,
)
from dexswap.contracts.quotes import PriceRoute, Quote, RouteStep
from dexswap.contracts.transactions import BuiltTransaction, SignedTxReceipt

__all__ = [
    "AggregatorError",
    "BuiltTransaction",
    "PriceRoute",
    "Quote",
    "RouteStep",
    "SignedTxReceipt",
    "decode_rate_response",
    "decode_transaction_response",
]
