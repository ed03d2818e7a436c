"""Swap dispatcher.

Hands a built transaction to the wallet's signer and returns the hash.
Holds no key material and does not wait for confirmation.
"""

import logging
import re

from dexswap.contracts.transactions import BuiltTransaction, SignedTxReceipt
from dexswap.errors import SignerRejected, SubmitFailed, WalletError
from dexswap.signing.base import WalletSigner, is_user_rejection

logger = logging.getLogger(__name__)

TX_HASH_PATTERN = re.compile(r"0x[0-9a-fA-F]{64}")


class SwapDispatcher:
    """Submits transactions through a wallet signer."""

    async def dispatch(self, tx: BuiltTransaction, signer: WalletSigner) -> SignedTxReceipt:
        """Sign and broadcast ``tx`` through ``signer``.

        Raises:
            SignerRejected: user cancelled or wallet policy refused
            SubmitFailed: broadcast failed or the wallet returned no valid hash
        """
        params = tx.to_tx_params()
        logger.info(f"Dispatching tx to {tx.to} via {signer!r}")

        try:
            tx_hash = await signer.send_transaction(params)
        except WalletError:
            raise
        except Exception as e:
            if is_user_rejection(e):
                logger.info(f"Wallet rejected tx to {tx.to}: {e}")
                raise SignerRejected(str(e)) from e
            logger.error(f"Wallet failed to submit tx to {tx.to}: {type(e).__name__}: {e}")
            raise SubmitFailed(f"{type(e).__name__}: {e}") from e

        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = "0x" + bytes(tx_hash).hex()
        if not isinstance(tx_hash, str) or not TX_HASH_PATTERN.fullmatch(tx_hash):
            raise SubmitFailed(f"Wallet returned an invalid transaction hash: {tx_hash!r}")

        logger.info(f"Swap submitted: {tx_hash}")
        return SignedTxReceipt(tx_hash=tx_hash, chain_id=tx.chain_id)
