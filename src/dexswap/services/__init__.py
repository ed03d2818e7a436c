"""Pipeline stages.

QuoteRequestor -> TransactionBuilder -> SwapDispatcher. None of these
touch private keys; signing is delegated to a WalletSigner.
"""

from dexswap.services.quote_requestor import QuoteRequestor
from dexswap.services.swap_dispatcher import SwapDispatcher
from dexswap.services.transaction_builder import TransactionBuilder

__all__ = [
    "QuoteRequestor",
    "SwapDispatcher",
    "TransactionBuilder",
]
