"""Quote requestor.

Asks the aggregator for the best SELL route. One HTTP attempt per call,
no caching: the market moves, so identical inputs may quote differently.
"""

import logging

from dexswap.aggregator.paraswap import ParaSwapClient
from dexswap.contracts.aggregator import AggregatorError
from dexswap.contracts.quotes import Quote
from dexswap.errors import QuoteFailed
from dexswap.tokens import TokenRef

logger = logging.getLogger(__name__)


class QuoteRequestor:
    """Turns aggregator rate responses into Quote objects."""

    def __init__(self, client: ParaSwapClient, quote_ttl_seconds: int = 60):
        self.client = client
        self.quote_ttl_seconds = quote_ttl_seconds

    async def get_quote(
        self,
        src: TokenRef,
        dest: TokenRef,
        amount: str,
        trader: str,
    ) -> Quote:
        """Get a SELL quote for ``amount`` base units of ``src``.

        Raises:
            QuoteFailed: aggregator answered with an error payload
            NetworkError: transport failure (safe to retry)
        """
        logger.info(f"Requesting quote: {amount} {src} -> {dest} for {trader}")

        result = await self.client.get_rate(src, dest, amount, trader)
        if isinstance(result, AggregatorError):
            logger.warning(f"{self.client.name} quote rejected: {result.message}")
            raise QuoteFailed(result.message, status_code=result.status_code)

        quote = Quote.from_price_route(
            result,
            src_token=src.address,
            dest_token=dest.address,
            src_amount=amount,
            trader=trader,
            network=self.client.chain_id,
            ttl_seconds=self.quote_ttl_seconds,
        )

        logger.info(
            f"Quote {quote.quote_id}: {quote.src_amount} {src} -> {quote.dest_amount} {dest} "
            f"via {quote.best_exchange or 'N/A'} ({len(quote.route)} leg(s))"
        )
        return quote
