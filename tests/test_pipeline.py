"""End-to-end tests for the quote-and-execute pipeline."""

import httpx
import pytest

from conftest import ROUTER, TRADER, TX_HASH, USDC, WETH, AggregatorStub, FakeSigner, make_price_route
from dexswap.config import Settings
from dexswap.errors import InvalidAmount, InvalidTokenFormat, NetworkError, QuoteFailed, StaleQuote
from dexswap.pipeline import SwapPipeline, create_pipeline

# Mixed-case input, as a user would paste it
WETH_INPUT = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC_INPUT = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
TRADER_INPUT = "0x" + "AB" * 20


@pytest.fixture
def pipeline(client) -> SwapPipeline:
    return SwapPipeline(client)


class TestGetQuote:
    """Tests for SwapPipeline.get_quote."""

    @pytest.mark.asyncio
    async def test_normalizes_inputs(self, pipeline, aggregator):
        """Test 1 unit of an 18-decimal token is quoted as 10**18 base units."""
        quote = await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER_INPUT)

        params = aggregator.rate_requests[0].url.params
        assert params["amount"] == "1000000000000000000"
        assert params["srcToken"] == WETH
        assert params["destToken"] == USDC
        assert params["userAddress"] == TRADER
        assert quote.dest_amount == "2500000000"

    @pytest.mark.asyncio
    async def test_stablecoin_source_uses_six_decimals(self, pipeline, aggregator):
        await pipeline.get_quote(USDC_INPUT, WETH_INPUT, "100", TRADER)

        assert aggregator.rate_requests[0].url.params["amount"] == "100000000"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "src,dest,amount,trader,error",
        [
            ("WETH", USDC_INPUT, "1", TRADER, InvalidTokenFormat),
            (WETH_INPUT, "0x123", "1", TRADER, InvalidTokenFormat),
            (WETH_INPUT, USDC_INPUT, "1", "trader", InvalidTokenFormat),
            (WETH_INPUT + "\n", USDC_INPUT, "1", TRADER, InvalidTokenFormat),
            (WETH_INPUT, USDC_INPUT, "1", TRADER + "\n", InvalidTokenFormat),
            (WETH_INPUT, USDC_INPUT, "-1", TRADER, InvalidAmount),
            (WETH_INPUT, USDC_INPUT, "0", TRADER, InvalidAmount),
            (WETH_INPUT, USDC_INPUT, "abc", TRADER, InvalidAmount),
            (USDC_INPUT, WETH_INPUT, "0.0000001", TRADER, InvalidAmount),
        ],
    )
    async def test_input_errors_never_reach_aggregator(self, pipeline, aggregator, src, dest, amount, trader, error):
        with pytest.raises(error):
            await pipeline.get_quote(src, dest, amount, trader)

        assert aggregator.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["1e-999999999", "1" + "0" * 5000, "1e5000"])
    async def test_out_of_range_amounts(self, pipeline, aggregator, amount):
        with pytest.raises(InvalidAmount):
            await pipeline.get_quote(WETH_INPUT, USDC_INPUT, amount, TRADER)

        assert aggregator.requests == []

    @pytest.mark.asyncio
    async def test_invalid_explicit_decimals(self, pipeline, aggregator, signer):
        with pytest.raises(InvalidAmount):
            await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER, src_decimals=-1)
        with pytest.raises(InvalidAmount):
            await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "1", TRADER, signer, dest_decimals=-1)

        assert aggregator.requests == []

    @pytest.mark.asyncio
    async def test_invalid_decimals_override(self, client, aggregator):
        token = "0x" + "cd" * 20
        pipeline = SwapPipeline(client, decimals_overrides={token: -1})

        with pytest.raises(InvalidAmount):
            await pipeline.get_quote(token, USDC_INPUT, "1", TRADER)

        assert aggregator.requests == []

    @pytest.mark.asyncio
    async def test_explicit_decimals(self, pipeline, aggregator):
        await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER, src_decimals=8)

        assert aggregator.rate_requests[0].url.params["amount"] == "100000000"

    @pytest.mark.asyncio
    async def test_decimals_overrides(self, client, aggregator):
        token = "0x" + "cd" * 20
        pipeline = SwapPipeline(client, decimals_overrides={token.upper().replace("0X", "0x"): 9})

        await pipeline.get_quote(token, USDC_INPUT, "2", TRADER)

        params = aggregator.rate_requests[0].url.params
        assert params["amount"] == "2000000000"
        assert params["srcDecimals"] == "9"

    @pytest.mark.asyncio
    async def test_transport_failure(self, make_client):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        pipeline = SwapPipeline(make_client(handler))

        with pytest.raises(NetworkError):
            await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER)


class TestExecuteSwap:
    """Tests for SwapPipeline.execute_swap."""

    @pytest.mark.asyncio
    async def test_quote_then_swap(self, pipeline, aggregator, signer):
        """Test the full flow: quote, then swap with the same inputs."""
        quote = await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER_INPUT)
        assert quote.dest_amount == "2500000000"

        tx_hash = await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "1", TRADER_INPUT, signer, quote=quote)

        assert tx_hash == TX_HASH
        assert len(signer.sent) == 1
        assert signer.sent[0]["to"] == ROUTER
        # quote was reused, not re-requested
        assert len(aggregator.rate_requests) == 1
        assert len(aggregator.build_requests) == 1

    @pytest.mark.asyncio
    async def test_swap_without_quote_requotes(self, pipeline, aggregator, signer):
        tx_hash = await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "1", TRADER, signer)

        assert tx_hash == TX_HASH
        assert len(aggregator.rate_requests) == 1
        assert aggregator.build_payloads()[0]["destAmount"] == "2500000000"

    @pytest.mark.asyncio
    async def test_changed_inputs_discard_quote(self, pipeline, aggregator, signer):
        quote = await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER)

        def rate(request):
            amount = request.url.params["amount"]
            return httpx.Response(200, json={"priceRoute": make_price_route(dest_amount="5000000000", src_amount=amount)})

        aggregator.rate = rate
        await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "2", TRADER, signer, quote=quote)

        assert len(aggregator.rate_requests) == 2
        assert aggregator.build_payloads()[0]["destAmount"] == "5000000000"
        assert aggregator.build_payloads()[0]["srcAmount"] == "2000000000000000000"

    @pytest.mark.asyncio
    async def test_reused_quote_not_built_twice(self, pipeline, aggregator, signer):
        """Test an already-used quote is refused instead of being built again."""
        quote = await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER)

        await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "1", TRADER, signer, quote=quote)
        with pytest.raises(StaleQuote):
            await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "1", TRADER, signer, quote=quote)

        assert len(aggregator.build_requests) == 1

    @pytest.mark.asyncio
    async def test_insufficient_liquidity(self, make_client):
        """Test an error-in-200 quote fails and nothing is built or signed."""
        stub = AggregatorStub(rate=lambda r: httpx.Response(200, json={"error": "insufficient liquidity"}))
        pipeline = SwapPipeline(make_client(stub))
        signer = FakeSigner()

        with pytest.raises(QuoteFailed) as exc_info:
            await pipeline.get_quote(WETH_INPUT, USDC_INPUT, "1", TRADER)
        assert exc_info.value.message == "insufficient liquidity"

        with pytest.raises(QuoteFailed):
            await pipeline.execute_swap(WETH_INPUT, USDC_INPUT, "1", TRADER, signer)

        assert stub.build_requests == []
        assert signer.sent == []


class TestCreatePipeline:
    """Tests for the settings-driven factory."""

    @pytest.mark.asyncio
    async def test_from_settings(self):
        settings = Settings(
            chain_id=137,
            paraswap_api_url="https://paraswap.example/",
            request_timeout=5.0,
            quote_ttl_seconds=15,
            slippage_bps=50,
        )

        async with create_pipeline(settings) as pipeline:
            assert pipeline.chain_id == 137
            assert pipeline.client.base_url == "https://paraswap.example"
            assert pipeline.client.timeout == 5.0
            assert pipeline.requestor.quote_ttl_seconds == 15
            assert pipeline.builder.slippage_bps == 50

    def test_safe_dict_redacts_secrets(self):
        settings = Settings(paraswap_api_key="k", signer_private_key="0x" + "11" * 32)

        data = settings.get_safe_dict()

        assert data["aggregator"]["api_key"] == "***"
        assert data["signer_key"] == "***"
