"""Local account signer.

Headless stand-in for a browser wallet: signs with an in-memory key via
eth_account and broadcasts over JSON-RPC. Suitable for:
- Development/testing against a fork or testnet
- Scripted swaps from a hot wallet with small amounts

WARNING: The private key lives in process memory.
"""

import logging
from typing import Any, Optional

import httpx
from eth_account import Account
from eth_utils import to_checksum_address

from dexswap.errors import SignerRejected, SubmitFailed
from dexswap.signing.base import WalletSigner

logger = logging.getLogger(__name__)


class LocalAccountSigner(WalletSigner):
    """WalletSigner backed by a private key and an RPC node."""

    def __init__(
        self,
        private_key: str,
        rpc_url: str,
        chain_id: int = 1,
        timeout: Optional[float] = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._account = Account.from_key(private_key)
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.timeout = timeout
        self._http_client = http_client
        self._request_id = 0

    @property
    def address(self) -> str:
        return self._account.address

    async def get_address(self) -> str:
        return self._account.address

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def _rpc(self, method: str, params: list) -> Any:
        """Call a JSON-RPC method and return its result.

        Raises:
            SubmitFailed: transport failure or JSON-RPC error
        """
        self._request_id += 1
        client = await self._get_client()
        try:
            response = await client.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": self._request_id,
                },
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"RPC {method} failed: {e}")
            raise SubmitFailed(f"RPC {method} failed: {e}") from e

        if not isinstance(data, dict):
            raise SubmitFailed(f"RPC {method} returned unexpected payload")

        if "error" in data:
            error = data["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logger.error(f"RPC {method} error: {message}")
            raise SubmitFailed(f"{method}: {message}")

        return data.get("result")

    async def _fill_transaction(self, params: dict[str, Any]) -> dict[str, Any]:
        """Complete the fields a wallet fills in before signing."""
        sender = params.get("from")
        if sender and sender.lower() != self._account.address.lower():
            raise SignerRejected(
                f"Transaction was built for {sender}, connected account is {self._account.address}"
            )

        tx = {
            "to": to_checksum_address(params["to"]),
            "data": params["data"],
            "value": params.get("value", 0),
            "chainId": params.get("chainId", self.chain_id),
        }

        if "gasPrice" in params:
            tx["gasPrice"] = params["gasPrice"]
        else:
            tx["gasPrice"] = int(await self._rpc("eth_gasPrice", []), 16)

        if "gas" in params:
            tx["gas"] = params["gas"]
        else:
            estimate = await self._rpc(
                "eth_estimateGas",
                [{
                    "from": self._account.address,
                    "to": tx["to"],
                    "data": tx["data"],
                    "value": hex(tx["value"]),
                }],
            )
            tx["gas"] = int(estimate, 16)

        nonce = await self._rpc("eth_getTransactionCount", [self._account.address, "pending"])
        tx["nonce"] = int(nonce, 16)
        return tx

    async def send_transaction(self, params: dict[str, Any]) -> str:
        """Sign locally and broadcast with eth_sendRawTransaction."""
        tx = await self._fill_transaction(params)
        signed = self._account.sign_transaction(tx)
        raw_tx = "0x" + bytes(signed.raw_transaction).hex()

        tx_hash = await self._rpc("eth_sendRawTransaction", [raw_tx])
        if not tx_hash:
            raise SubmitFailed("eth_sendRawTransaction returned no hash")

        logger.info(f"Broadcast tx {tx_hash} from {self._account.address} (nonce {tx['nonce']})")
        return tx_hash

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
