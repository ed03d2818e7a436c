"""Transaction contracts for wallet-side signing.

Numeric fields are integers. ``None`` means the aggregator did not send
the field, and it is then left out of the signer params entirely:
omitting ``value`` is not the same as sending ``value = 0`` for every
wallet.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BuiltTransaction(BaseModel):
    """Executable swap transaction returned by the aggregator."""

    model_config = ConfigDict(frozen=True)

    to: str = Field(..., description="Router/contract address")
    data: str = Field(..., description="Calldata (hex)")
    value: Optional[int] = Field(None, ge=0, description="Native value in wei")
    gas_price: Optional[int] = Field(None, ge=0, description="Gas price in wei")
    gas_limit: Optional[int] = Field(None, ge=0, description="Gas limit")
    chain_id: Optional[int] = Field(None, description="EVM chain ID")
    from_address: Optional[str] = Field(None, description="Sender the tx was built for")

    def to_tx_params(self) -> dict[str, Any]:
        """Signer-ready dict (EIP-1193 / eth_account key names)."""
        params: dict[str, Any] = {"to": self.to, "data": self.data}
        if self.value is not None:
            params["value"] = self.value
        if self.gas_price is not None:
            params["gasPrice"] = self.gas_price
        if self.gas_limit is not None:
            params["gas"] = self.gas_limit
        if self.chain_id is not None:
            params["chainId"] = self.chain_id
        if self.from_address is not None:
            params["from"] = self.from_address
        return params


class SignedTxReceipt(BaseModel):
    """Hash of a broadcast transaction. Confirmation is not tracked."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str = Field(..., description="Transaction hash")
    chain_id: Optional[int] = Field(None, description="EVM chain ID")
