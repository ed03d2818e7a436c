"""Quote-and-execute pipeline.

Public surface for the UI layer. Both entry points take raw, unnormalized
strings; validation and normalization happen here, before any network
call:

    validate tokens -> to base units -> quote -> (swap) build -> dispatch

The aggregator client is built once at application start and injected.
"""

import logging
from typing import Optional

from dexswap.aggregator.paraswap import ParaSwapClient
from dexswap.amounts import to_base_units
from dexswap.config import Settings, get_settings
from dexswap.contracts.quotes import Quote
from dexswap.errors import InvalidAmount
from dexswap.services.quote_requestor import QuoteRequestor
from dexswap.services.swap_dispatcher import SwapDispatcher
from dexswap.services.transaction_builder import TransactionBuilder
from dexswap.signing.base import WalletSigner
from dexswap.tokens import TokenRef, validate_address, validate_token

logger = logging.getLogger(__name__)


class SwapPipeline:
    """Validates inputs, quotes, builds and dispatches swaps on one chain."""

    def __init__(
        self,
        client: ParaSwapClient,
        quote_ttl_seconds: int = 60,
        slippage_bps: Optional[int] = None,
        ignore_checks: bool = False,
        decimals_overrides: Optional[dict[str, int]] = None,
    ):
        """Initialize the pipeline.

        Args:
            client: Aggregator client; its chain id is the pipeline's chain
            quote_ttl_seconds: Quote validity period
            slippage_bps: Slippage sent on build instead of the exact destAmount
            ignore_checks: Skip aggregator balance/allowance checks on build
            decimals_overrides: Token address -> decimals, for tokens outside
                the built-in table
        """
        self.client = client
        self.chain_id = client.chain_id
        self.requestor = QuoteRequestor(client, quote_ttl_seconds=quote_ttl_seconds)
        self.builder = TransactionBuilder(
            client, slippage_bps=slippage_bps, ignore_checks=ignore_checks
        )
        self.dispatcher = SwapDispatcher()
        self.decimals_overrides = {
            address.lower(): decimals for address, decimals in (decimals_overrides or {}).items()
        }

    def _token(self, value: str, decimals: Optional[int]) -> TokenRef:
        if decimals is None and isinstance(value, str):
            decimals = self.decimals_overrides.get(value.lower())
        return validate_token(value, chain_id=self.chain_id, decimals=decimals)

    def prepare(
        self,
        src_token: str,
        dest_token: str,
        amount: str,
        trader: str,
        src_decimals: Optional[int] = None,
        dest_decimals: Optional[int] = None,
    ) -> tuple[TokenRef, TokenRef, str, str]:
        """Validate and normalize raw inputs.

        Returns:
            (src, dest, base-unit amount, lowercase trader)

        Raises:
            InvalidTokenFormat: malformed token or trader address
            InvalidAmount: non-numeric, non-positive, below token precision,
                too large, or invalid token decimals
        """
        src = self._token(src_token, src_decimals)
        dest = self._token(dest_token, dest_decimals)
        trader_address = validate_address(trader)

        base_amount = to_base_units(amount, src.decimals)
        if base_amount == "0":
            raise InvalidAmount(amount, f"smaller than the token precision ({src.decimals} decimals)")

        return src, dest, base_amount, trader_address

    async def get_quote(
        self,
        src_token: str,
        dest_token: str,
        amount: str,
        trader: str,
        src_decimals: Optional[int] = None,
        dest_decimals: Optional[int] = None,
    ) -> Quote:
        """Quote selling ``amount`` (human units) of ``src_token`` for ``dest_token``.

        Raises:
            InvalidTokenFormat, InvalidAmount: before any network call
            QuoteFailed: aggregator reported an error
            NetworkError: transport failure
        """
        src, dest, base_amount, trader_address = self.prepare(
            src_token, dest_token, amount, trader, src_decimals, dest_decimals
        )
        return await self.requestor.get_quote(src, dest, base_amount, trader_address)

    async def execute_swap(
        self,
        src_token: str,
        dest_token: str,
        amount: str,
        trader: str,
        signer: WalletSigner,
        quote: Optional[Quote] = None,
        src_decimals: Optional[int] = None,
        dest_decimals: Optional[int] = None,
    ) -> str:
        """Quote (or reuse ``quote``), build and dispatch a swap.

        A supplied quote is reused only if it was issued for exactly these
        inputs and has not expired; otherwise a fresh quote is requested.

        Returns:
            Transaction hash
        """
        src, dest, base_amount, trader_address = self.prepare(
            src_token, dest_token, amount, trader, src_decimals, dest_decimals
        )

        reusable = (
            quote is not None
            and quote.matches(src.address, dest.address, base_amount, trader_address)
            and not quote.is_expired
        )
        if reusable:
            logger.info(f"Reusing quote {quote.quote_id} ({quote.seconds_until_expiry:.0f}s left)")
        else:
            if quote is not None:
                logger.info(f"Discarding quote {quote.quote_id}: inputs changed or quote expired")
            quote = await self.requestor.get_quote(src, dest, base_amount, trader_address)

        tx = await self.builder.build_tx(src, dest, base_amount, quote, trader_address)
        receipt = await self.dispatcher.dispatch(tx, signer)
        return receipt.tx_hash

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "SwapPipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_pipeline(settings: Optional[Settings] = None) -> SwapPipeline:
    """Build the aggregator client and pipeline from settings."""
    settings = settings or get_settings()
    client = ParaSwapClient(
        base_url=settings.paraswap_api_url,
        chain_id=settings.chain_id,
        timeout=settings.request_timeout,
        partner=settings.partner,
        api_key=settings.paraswap_api_key,
        api_version=settings.paraswap_api_version,
    )
    logger.info(f"Swap pipeline on chain {settings.chain_id} using {settings.paraswap_api_url}")
    return SwapPipeline(
        client,
        quote_ttl_seconds=settings.quote_ttl_seconds,
        slippage_bps=settings.slippage_bps,
        ignore_checks=settings.ignore_checks,
    )
