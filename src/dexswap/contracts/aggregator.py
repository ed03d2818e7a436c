"""Edge decoding of aggregator responses.

Raw JSON is turned into either a success model or an AggregatorError,
once, right after the HTTP call. Nothing deeper in the pipeline looks
at raw response shapes again.

An ``error`` key always wins, whatever the HTTP status: the aggregator
sometimes reports failures inside a 200 response.
"""

import logging
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from dexswap.contracts.quotes import PriceRoute, RouteStep
from dexswap.contracts.transactions import BuiltTransaction
from dexswap.errors import InvalidTransactionData
from dexswap.tokens import ADDRESS_PATTERN

logger = logging.getLogger(__name__)


class AggregatorError(BaseModel):
    """Error variant of an aggregator response."""

    model_config = ConfigDict(frozen=True)

    message: str
    status_code: Optional[int] = None


RateResult = Union[PriceRoute, AggregatorError]
BuildResult = Union[BuiltTransaction, AggregatorError]


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("error") or error)
    return str(error)


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _optional_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _is_uint_string(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.isdigit()


def parse_uint(value: Any, field: str) -> Optional[int]:
    """Decimal or 0x-hex string to int; ``None`` when the field is absent.

    Raises:
        InvalidTransactionData: negative or non-numeric value
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidTransactionData(f"Invalid {field}: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise InvalidTransactionData(f"Invalid {field}: {value!r}")
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            if text.isdigit():
                return int(text)
        except ValueError:
            pass
    raise InvalidTransactionData(f"Invalid {field}: {value!r}")


def flatten_best_route(best_route: Any) -> list[RouteStep]:
    """Flatten ``bestRoute[].swaps[].swapExchanges[]`` into route steps."""
    steps: list[RouteStep] = []
    if not isinstance(best_route, list):
        return steps

    for route in best_route:
        if not isinstance(route, dict):
            continue
        for swap in route.get("swaps") or []:
            if not isinstance(swap, dict):
                continue
            for exchange in swap.get("swapExchanges") or []:
                if not isinstance(exchange, dict):
                    continue
                steps.append(
                    RouteStep(
                        exchange=str(exchange.get("exchange") or "unknown"),
                        src_token=str(swap.get("srcToken") or "").lower(),
                        dest_token=str(swap.get("destToken") or "").lower(),
                        src_amount=_optional_str(exchange.get("srcAmount")),
                        dest_amount=_optional_str(exchange.get("destAmount")),
                        percent=_optional_float(exchange.get("percent")),
                    )
                )
    return steps


def decode_rate_response(body: Any, status_code: Optional[int] = None) -> RateResult:
    """Decode a rate endpoint body into PriceRoute or AggregatorError."""
    if isinstance(body, dict) and "error" in body:
        return AggregatorError(message=_error_message(body["error"]), status_code=status_code)

    if not isinstance(body, dict):
        return AggregatorError(
            message=f"Unexpected rate response (HTTP {status_code})",
            status_code=status_code,
        )

    route = body.get("priceRoute", body)
    if not isinstance(route, dict) or not _is_uint_string(route.get("destAmount")):
        return AggregatorError(
            message="Rate response has no destAmount",
            status_code=status_code,
        )

    return PriceRoute(
        dest_amount=str(route["destAmount"]),
        src_amount=_optional_str(route.get("srcAmount")),
        src_token=_optional_str(route.get("srcToken")),
        dest_token=_optional_str(route.get("destToken")),
        side=str(route.get("side") or "SELL"),
        gas_cost=_optional_str(route.get("gasCost")),
        gas_cost_usd=_optional_str(route.get("gasCostUSD")),
        steps=flatten_best_route(route.get("bestRoute")),
        raw=route,
    )


def decode_transaction_response(body: Any, status_code: Optional[int] = None) -> BuildResult:
    """Decode a transaction endpoint body into BuiltTransaction or AggregatorError.

    Raises:
        InvalidTransactionData: success-shaped body without a usable ``to``/``data``
    """
    if isinstance(body, dict) and "error" in body:
        return AggregatorError(message=_error_message(body["error"]), status_code=status_code)

    if not isinstance(body, dict):
        return AggregatorError(
            message=f"Unexpected transaction response (HTTP {status_code})",
            status_code=status_code,
        )

    to = body.get("to")
    if not to:
        raise InvalidTransactionData("Invalid transaction data: missing 'to'")
    if not isinstance(to, str) or not ADDRESS_PATTERN.fullmatch(to):
        raise InvalidTransactionData(f"Invalid transaction data: bad 'to' address {to!r}")

    data = body.get("data")
    if not isinstance(data, str) or not data.lower().startswith("0x"):
        raise InvalidTransactionData("Invalid transaction data: missing or non-hex 'data'")

    sender = body.get("from")
    return BuiltTransaction(
        to=to,
        data=data,
        value=parse_uint(body.get("value"), "value"),
        gas_price=parse_uint(body.get("gasPrice"), "gasPrice"),
        gas_limit=parse_uint(body.get("gas"), "gas"),
        chain_id=parse_uint(body.get("chainId"), "chainId"),
        from_address=sender if isinstance(sender, str) and sender else None,
    )
