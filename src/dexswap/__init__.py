"""dexswap - quote and execute token swaps through a DEX aggregator."""

from dexswap.errors import (
    BuildFailed,
    InvalidAmount,
    InvalidTokenFormat,
    InvalidTransactionData,
    NetworkError,
    QuoteFailed,
    SignerRejected,
    StaleQuote,
    SubmitFailed,
    SwapError,
)
from dexswap.pipeline import SwapPipeline, create_pipeline

__version__ = "0.1.0"

__all__ = [
    "BuildFailed",
    "InvalidAmount",
    "InvalidTokenFormat",
    "InvalidTransactionData",
    "NetworkError",
    "QuoteFailed",
    "SignerRejected",
    "StaleQuote",
    "SubmitFailed",
    "SwapError",
    "SwapPipeline",
    "create_pipeline",
]
