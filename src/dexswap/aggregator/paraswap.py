"""ParaSwap DEX aggregator client.

Two endpoints are consumed:
- GET  /prices                      best SELL route for a token pair
- POST /transactions/{network}      calldata for an agreed route

API docs: https://developers.paraswap.network/api/paraswap-api

The client is built once and shared. It keeps one httpx.AsyncClient and
no per-call state, so concurrent calls are safe. Each call makes exactly
one HTTP attempt; retrying is left to the caller.
"""

import logging
from typing import Any, Optional

import httpx

from dexswap.contracts.aggregator import (
    BuildResult,
    RateResult,
    decode_rate_response,
    decode_transaction_response,
)
from dexswap.errors import NetworkError
from dexswap.tokens import TokenRef

logger = logging.getLogger(__name__)

PARASWAP_API = "https://api.paraswap.io"
PARASWAP_API_VERSION = "6.2"

SIDE_SELL = "SELL"


class ParaSwapClient:
    """Thin async client for the ParaSwap REST API."""

    def __init__(
        self,
        base_url: str = PARASWAP_API,
        chain_id: int = 1,
        timeout: Optional[float] = 30.0,
        partner: str = "dexswap",
        api_key: Optional[str] = None,
        api_version: str = PARASWAP_API_VERSION,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, without trailing slash
            chain_id: Network the client is bound to (fixed for its lifetime)
            timeout: Per-request timeout in seconds (None = no timeout)
            partner: Partner tag sent with every request
            api_key: Optional API key for rate-limit tiers
            api_version: Route version requested from /prices
            http_client: Pre-built httpx client (tests, shared pools)
        """
        self.base_url = base_url.rstrip("/")
        self.chain_id = chain_id
        self.timeout = timeout
        self.partner = partner
        self.api_key = api_key
        self.api_version = api_version
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def name(self) -> str:
        return f"ParaSwap (chain {self.chain_id})"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "ParaSwapClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _get_headers(self) -> dict:
        """Get API headers."""
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> tuple[int, Any]:
        """Perform one HTTP call and return (status, decoded JSON or None).

        Raises:
            NetworkError: transport failure, timeout or 5xx status
        """
        client = await self._get_client()
        url = f"{self.base_url}{path}"

        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._get_headers(),
            )
        except httpx.TimeoutException as e:
            logger.error(f"ParaSwap {method} {path} timed out: {e}")
            raise NetworkError(f"ParaSwap request timed out: {method} {path}") from e
        except httpx.TransportError as e:
            logger.error(f"ParaSwap {method} {path} transport error: {type(e).__name__}: {e}")
            raise NetworkError(f"ParaSwap transport error: {type(e).__name__}: {e}") from e

        if response.status_code >= 500:
            logger.error(f"ParaSwap {method} {path} returned {response.status_code}: {response.text[:200]}")
            raise NetworkError(
                f"ParaSwap server error: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"ParaSwap {method} {path} returned non-JSON body (HTTP {response.status_code})")
            body = None

        return response.status_code, body

    async def get_rate(
        self,
        src: TokenRef,
        dest: TokenRef,
        amount: str,
        trader: str,
    ) -> RateResult:
        """Request the best SELL route for ``amount`` base units of ``src``.

        Returns:
            PriceRoute on success, AggregatorError if the API reported one
        """
        params = {
            "srcToken": src.address,
            "destToken": dest.address,
            "amount": amount,
            "srcDecimals": src.decimals,
            "destDecimals": dest.decimals,
            "side": SIDE_SELL,
            "network": self.chain_id,
            "userAddress": trader,
            "partner": self.partner,
            "version": self.api_version,
        }

        logger.debug(f"ParaSwap rate request: {params}")
        status, body = await self._request("GET", "/prices", params=params)
        return decode_rate_response(body, status)

    async def build_transaction(
        self,
        src: TokenRef,
        dest: TokenRef,
        src_amount: str,
        price_route: dict,
        trader: str,
        dest_amount: Optional[str] = None,
        slippage_bps: Optional[int] = None,
        ignore_checks: bool = False,
    ) -> BuildResult:
        """Encode an agreed route as an executable transaction.

        Either ``dest_amount`` (minimum received) or ``slippage_bps`` is sent,
        the API rejects requests carrying both.

        Returns:
            BuiltTransaction on success, AggregatorError if the API reported one

        Raises:
            InvalidTransactionData: success response without ``to``/``data``
        """
        payload: dict[str, Any] = {
            "srcToken": src.address,
            "destToken": dest.address,
            "srcAmount": src_amount,
            "srcDecimals": src.decimals,
            "destDecimals": dest.decimals,
            "priceRoute": price_route,
            "userAddress": trader,
            "partner": self.partner,
        }
        if slippage_bps is not None:
            payload["slippage"] = slippage_bps
        else:
            payload["destAmount"] = dest_amount

        params = {"ignoreChecks": "true"} if ignore_checks else None

        status, body = await self._request(
            "POST",
            f"/transactions/{self.chain_id}",
            params=params,
            json=payload,
        )
        return decode_transaction_response(body, status)


def create_paraswap_client(
    chain_id: int = 1,
    base_url: str = PARASWAP_API,
    timeout: Optional[float] = 30.0,
    partner: str = "dexswap",
    api_key: Optional[str] = None,
) -> ParaSwapClient:
    """Create a ParaSwap client instance."""
    return ParaSwapClient(
        base_url=base_url,
        chain_id=chain_id,
        timeout=timeout,
        partner=partner,
        api_key=api_key,
    )
