"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from dexswap.aggregator.paraswap import ParaSwapClient
from dexswap.signing.base import WalletSigner
from dexswap.tokens import COMMON_TOKENS

WETH = COMMON_TOKENS[1]["WETH"]
USDC = COMMON_TOKENS[1]["USDC"]
USDT = COMMON_TOKENS[1]["USDT"]
TRADER = "0x" + "ab" * 20
ROUTER = "0x6a000f20005980200259b80c5102003040001068"
TX_HASH = "0x" + "12" * 32


def make_price_route(
    dest_amount: str = "2500000000",
    src_token: str = WETH,
    dest_token: str = USDC,
    src_amount: str = "1000000000000000000",
    exchange: str = "UniswapV3",
) -> dict:
    """A trimmed ParaSwap priceRoute."""
    return {
        "blockNumber": 19000000,
        "network": 1,
        "srcToken": src_token,
        "srcDecimals": 18,
        "srcAmount": src_amount,
        "destToken": dest_token,
        "destDecimals": 6,
        "destAmount": dest_amount,
        "bestRoute": [
            {
                "percent": 100,
                "swaps": [
                    {
                        "srcToken": src_token,
                        "srcDecimals": 18,
                        "destToken": dest_token,
                        "destDecimals": 6,
                        "swapExchanges": [
                            {
                                "exchange": exchange,
                                "srcAmount": src_amount,
                                "destAmount": dest_amount,
                                "percent": 100,
                                "poolAddresses": ["0x88e6a0c2ddd26feeb64f039a2c41296fcb3f5640"],
                            }
                        ],
                    }
                ],
            }
        ],
        "gasCostUSD": "4.21",
        "gasCost": "150000",
        "side": "SELL",
        "tokenTransferProxy": "0x216b4b4ba9f3e719726886d34a177484278bfcae",
        "contractAddress": ROUTER,
        "contractMethod": "swapExactAmountIn",
    }


def make_tx_params(**overrides: Any) -> dict:
    """A ParaSwap /transactions success payload."""
    params = {
        "from": TRADER,
        "to": ROUTER,
        "value": "0",
        "data": "0xe3ead59e" + "00" * 64,
        "gasPrice": "30000000000",
        "gas": "250000",
        "chainId": 1,
    }
    params.update(overrides)
    return {key: value for key, value in params.items() if value is not None}


class AggregatorStub:
    """Routes mocked ParaSwap requests and records what was sent."""

    def __init__(
        self,
        rate: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        build: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ):
        self.rate = rate or (lambda request: httpx.Response(200, json={"priceRoute": make_price_route()}))
        self.build = build or (lambda request: httpx.Response(200, json=make_tx_params()))
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/prices":
            return self.rate(request)
        if request.url.path.startswith("/transactions/"):
            return self.build(request)
        return httpx.Response(404, json={"error": "Not found"})

    @property
    def rate_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/prices"]

    @property
    def build_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/transactions/")]

    def build_payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.build_requests]


class FakeSigner(WalletSigner):
    """WalletSigner that records params and returns a fixed hash."""

    def __init__(self, tx_hash: str = TX_HASH, error: Optional[Exception] = None):
        self.tx_hash = tx_hash
        self.error = error
        self.sent: list[dict] = []

    async def get_address(self) -> str:
        return TRADER

    async def send_transaction(self, params: dict) -> str:
        self.sent.append(params)
        if self.error is not None:
            raise self.error
        return self.tx_hash


@pytest.fixture
def aggregator() -> AggregatorStub:
    return AggregatorStub()


@pytest.fixture
def make_client():
    """Factory for ParaSwapClient bound to a mock transport."""

    def factory(handler: Callable[[httpx.Request], httpx.Response], chain_id: int = 1) -> ParaSwapClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ParaSwapClient(base_url="https://api.test", chain_id=chain_id, http_client=http_client)

    return factory


@pytest.fixture
def client(make_client, aggregator) -> ParaSwapClient:
    return make_client(aggregator)


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()
