"""Wallet signing capabilities.

The pipeline only sees the WalletSigner interface. LocalAccountSigner is
a headless implementation for scripts and tests.
"""

from dexswap.signing.base import WalletSigner, is_user_rejection
from dexswap.signing.local import LocalAccountSigner

__all__ = [
    "LocalAccountSigner",
    "WalletSigner",
    "is_user_rejection",
]
