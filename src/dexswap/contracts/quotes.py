"""Quote contracts.

A Quote is produced once by the quote requestor and never mutated.
It carries the raw aggregator route because the transaction endpoint
needs it back as proof of the agreed price.
"""

import time
import uuid
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RouteStep(BaseModel):
    """One venue-level leg of the selected route."""

    model_config = ConfigDict(frozen=True)

    exchange: str = Field(..., description="Venue name (UniswapV3, Curve, ...)")
    src_token: str = Field(..., description="Input token address")
    dest_token: str = Field(..., description="Output token address")
    src_amount: Optional[str] = Field(None, description="Input amount (base units)")
    dest_amount: Optional[str] = Field(None, description="Output amount (base units)")
    percent: Optional[float] = Field(None, description="Share of the swap routed here")


class PriceRoute(BaseModel):
    """Decoded success payload of the aggregator rate endpoint."""

    model_config = ConfigDict(frozen=True)

    dest_amount: str
    src_amount: Optional[str] = None
    src_token: Optional[str] = None
    dest_token: Optional[str] = None
    side: str = "SELL"
    gas_cost: Optional[str] = None
    gas_cost_usd: Optional[str] = None
    steps: list[RouteStep] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)


class Quote(BaseModel):
    """An executable SELL-side quote for one (src, dest, amount, trader) tuple."""

    model_config = ConfigDict(frozen=True)

    quote_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    src_token: str = Field(..., description="Source token address (lowercase)")
    dest_token: str = Field(..., description="Destination token address (lowercase)")
    src_amount: str = Field(..., description="Amount sold, in base units")
    dest_amount: str = Field(..., description="Expected amount received, in base units")
    trader: str = Field(..., description="Trader address (lowercase)")
    network: int = Field(default=1, description="EVM chain id")
    side: Literal["SELL"] = "SELL"
    route: list[RouteStep] = Field(default_factory=list)
    gas_cost: Optional[str] = Field(None, description="Estimated gas units")
    gas_cost_usd: Optional[str] = Field(None, description="Estimated gas cost in USD")
    price_route: dict[str, Any] = Field(default_factory=dict, description="Raw aggregator route")
    timestamp: float = Field(default_factory=time.time)
    ttl_seconds: int = Field(default=60, description="Quote validity period")

    @classmethod
    def from_price_route(
        cls,
        price_route: PriceRoute,
        src_token: str,
        dest_token: str,
        src_amount: str,
        trader: str,
        network: int = 1,
        ttl_seconds: int = 60,
    ) -> "Quote":
        return cls(
            src_token=src_token.lower(),
            dest_token=dest_token.lower(),
            src_amount=src_amount,
            dest_amount=price_route.dest_amount,
            trader=trader.lower(),
            network=network,
            route=list(price_route.steps),
            gas_cost=price_route.gas_cost,
            gas_cost_usd=price_route.gas_cost_usd,
            price_route=price_route.raw,
            ttl_seconds=ttl_seconds,
        )

    @property
    def best_exchange(self) -> Optional[str]:
        """Venue of the first route leg, if any."""
        return self.route[0].exchange if self.route else None

    @property
    def is_expired(self) -> bool:
        return time.time() > (self.timestamp + self.ttl_seconds)

    @property
    def seconds_until_expiry(self) -> float:
        """Seconds until the quote expires (negative if expired)."""
        return (self.timestamp + self.ttl_seconds) - time.time()

    def matches(self, src_token: str, dest_token: str, src_amount: str, trader: str) -> bool:
        """Whether this quote was issued for the given request tuple."""
        return (
            self.src_token == src_token.lower()
            and self.dest_token == dest_token.lower()
            and self.src_amount == src_amount
            and self.trader == trader.lower()
        )
