"""Transaction builder for swap execution.

Turns a validated Quote into an executable transaction by sending the
quoted route back to the aggregator. NO signing or broadcasting happens
here.

A quote is good for exactly one build. It is refused before any network
call when it:
- has no destAmount (e.g. an error payload that slipped through)
- was issued for a different (src, dest, amount, trader) tuple or chain
- has expired
- was already consumed by this builder

Consumption is remembered until the quote would have expired anyway.
A raw route mapping has no quote id of its own, so it is identified by a
digest of its canonical JSON.
"""

import hashlib
import json
import logging
import time
from collections.abc import Mapping
from typing import Any, Optional, Union

from dexswap.aggregator.paraswap import ParaSwapClient
from dexswap.contracts.aggregator import AggregatorError, decode_rate_response
from dexswap.contracts.quotes import Quote
from dexswap.contracts.transactions import BuiltTransaction
from dexswap.errors import BuildFailed, StaleQuote
from dexswap.tokens import TokenRef

logger = logging.getLogger(__name__)


def route_digest(route: Mapping[str, Any]) -> str:
    """Stable identity of a raw aggregator route."""
    canonical = json.dumps(route, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


class TransactionBuilder:
    """Builds swap transactions from quotes for wallet-side signing."""

    def __init__(
        self,
        client: ParaSwapClient,
        slippage_bps: Optional[int] = None,
        ignore_checks: bool = False,
    ):
        """Initialize the builder.

        Args:
            client: Aggregator client
            slippage_bps: Send a slippage tolerance instead of the exact
                quoted destAmount (basis points, 50 = 0.5%)
            ignore_checks: Skip the aggregator's balance/allowance checks
        """
        self.client = client
        self.slippage_bps = slippage_bps
        self.ignore_checks = ignore_checks
        # quote id -> expiry timestamp
        self._consumed: dict[str, float] = {}

    def _coerce_quote(
        self,
        quote: Union[Quote, Mapping[str, Any]],
        src: TokenRef,
        dest: TokenRef,
        src_amount: str,
        trader: str,
    ) -> Quote:
        """Accept a Quote, or decode a raw aggregator route once."""
        if isinstance(quote, Quote):
            return quote

        if not isinstance(quote, Mapping):
            raise StaleQuote(f"not a quote: {type(quote).__name__}")
        if "error" in quote:
            raise StaleQuote(f"quote is an error payload: {quote['error']}")

        result = decode_rate_response(dict(quote))
        if isinstance(result, AggregatorError):
            raise StaleQuote("quote has no destAmount")

        if result.src_token and result.src_token.lower() != src.address:
            raise StaleQuote("route source token does not match request")
        if result.dest_token and result.dest_token.lower() != dest.address:
            raise StaleQuote("route destination token does not match request")
        if result.src_amount and result.src_amount != src_amount:
            raise StaleQuote("route source amount does not match request")

        checked = Quote.from_price_route(
            result,
            src_token=src.address,
            dest_token=dest.address,
            src_amount=src_amount,
            trader=trader,
            network=self.client.chain_id,
        )
        return checked.model_copy(update={"quote_id": route_digest(quote)})

    def _prune_consumed(self) -> None:
        now = time.time()
        expired = [quote_id for quote_id, expires_at in self._consumed.items() if expires_at < now]
        for quote_id in expired:
            del self._consumed[quote_id]

    def check_quote(
        self,
        quote: Union[Quote, Mapping[str, Any]],
        src: TokenRef,
        dest: TokenRef,
        src_amount: str,
        trader: str,
    ) -> Quote:
        """Validate a quote for the given request tuple.

        Raises:
            StaleQuote: if the quote cannot be executed
        """
        checked = self._coerce_quote(quote, src, dest, src_amount, trader)

        if not checked.matches(src.address, dest.address, src_amount, trader):
            raise StaleQuote("quote was issued for a different request")
        if checked.network != self.client.chain_id:
            raise StaleQuote(f"quote is for chain {checked.network}, builder is on {self.client.chain_id}")
        if checked.is_expired:
            raise StaleQuote(f"quote {checked.quote_id} expired {-checked.seconds_until_expiry:.0f}s ago")
        if checked.quote_id in self._consumed:
            raise StaleQuote(f"quote {checked.quote_id} was already used")
        return checked

    async def build_tx(
        self,
        src: TokenRef,
        dest: TokenRef,
        src_amount: str,
        quote: Union[Quote, Mapping[str, Any]],
        trader: str,
    ) -> BuiltTransaction:
        """Build an executable transaction for a quote.

        Args:
            src: Source token
            dest: Destination token
            src_amount: Amount sold, in base units (must match the quote)
            quote: Quote from the requestor for this exact tuple
            trader: Sender address (must match the quote)

        Returns:
            BuiltTransaction for the wallet to sign

        Raises:
            StaleQuote: quote unusable (checked before any network call)
            BuildFailed: aggregator answered with an error payload
            InvalidTransactionData: aggregator response lacks ``to``
            NetworkError: transport failure
        """
        self._prune_consumed()
        checked = self.check_quote(quote, src, dest, src_amount, trader)
        self._consumed[checked.quote_id] = checked.timestamp + checked.ttl_seconds

        logger.info(f"Building tx for quote {checked.quote_id}: {src_amount} {src} -> {dest}")

        result = await self.client.build_transaction(
            src,
            dest,
            src_amount,
            price_route=checked.price_route,
            trader=trader,
            dest_amount=checked.dest_amount,
            slippage_bps=self.slippage_bps,
            ignore_checks=self.ignore_checks,
        )
        if isinstance(result, AggregatorError):
            logger.warning(f"{self.client.name} build rejected: {result.message}")
            raise BuildFailed(result.message, status_code=result.status_code)

        logger.info(
            f"Built tx to {result.to} (value={result.value}, gas={result.gas_limit}, "
            f"gasPrice={result.gas_price})"
        )
        return result
