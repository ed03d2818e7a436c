"""Wallet signer interface.

The pipeline never touches private keys. It hands a params dict to a
wallet-provided signer, which signs, broadcasts and returns the hash.

Signing flow:
1. Aggregator returns tx params (to, data, value, gas...)
2. Signer asks the wallet holder / key store to authorize
3. Signer broadcasts the signed transaction
4. Signer returns the transaction hash (no confirmation wait)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001
# ethers-style error code for the same condition
ACTION_REJECTED = "ACTION_REJECTED"


class WalletSigner(ABC):
    """Signing capability of a connected wallet.

    Implementations should raise SignerRejected when the holder or a
    wallet policy refuses, and SubmitFailed when broadcast fails. Other
    exceptions are classified by the dispatcher.
    """

    @abstractmethod
    async def get_address(self) -> str:
        """Address of the connected account."""
        pass

    @abstractmethod
    async def send_transaction(self, params: dict[str, Any]) -> str:
        """Sign and broadcast a transaction.

        Args:
            params: Signer params (to, data, and optionally value, gasPrice,
                gas, chainId, from). Absent keys must not be defaulted to zero
                by the caller.

        Returns:
            Transaction hash as 0x-prefixed hex
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def is_user_rejection(error: BaseException) -> bool:
    """Whether a provider exception means the user or wallet said no."""
    code = getattr(error, "code", None)
    if code == USER_REJECTED_CODE or code == ACTION_REJECTED:
        return True

    message = str(error).lower()
    return "user rejected" in message or "user denied" in message
