"""Conversion between human decimal amounts and integer base units.

Extra fractional digits beyond the token's precision are truncated
toward zero, never rounded: "0.0000001" at 6 decimals becomes "0".
"""

from decimal import Decimal, InvalidOperation

from dexswap.errors import InvalidAmount

# Token amounts are uint256 on chain
MAX_UINT256 = 2**256 - 1
MAX_BASE_UNIT_DIGITS = len(str(MAX_UINT256))


def parse_amount(human_amount: str) -> Decimal:
    """Parse a user-entered amount as a finite, positive Decimal."""
    if not isinstance(human_amount, str) or not human_amount.strip():
        raise InvalidAmount(str(human_amount), "amount is empty")

    try:
        value = Decimal(human_amount.strip())
    except InvalidOperation:
        raise InvalidAmount(human_amount, "not a decimal number")

    if not value.is_finite():
        raise InvalidAmount(human_amount, "amount must be finite")
    if value.is_signed() or value == 0:
        raise InvalidAmount(human_amount, "amount must be greater than zero")
    return value


def to_base_units(human_amount: str, decimals: int) -> str:
    """Convert a human amount into a base-unit integer string.

    Args:
        human_amount: Decimal string, e.g. "1.5"
        decimals: Token precision, e.g. 18 for ETH, 6 for USDC

    Returns:
        Integer string with no sign, no decimal point, no leading zeros

    Raises:
        InvalidAmount: non-numeric, negative or zero input, or a base-unit
            value that does not fit in uint256
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmount(str(human_amount), f"invalid token decimals {decimals!r}")

    value = parse_amount(human_amount)

    # Checked on the exponent before any digits are materialized
    if value.adjusted() + decimals >= MAX_BASE_UNIT_DIGITS:
        raise InvalidAmount(human_amount, "amount too large")

    # Exact integer arithmetic on the decimal digits, no float involved
    _, digits, exponent = value.as_tuple()
    shift = exponent + decimals
    if shift < 0:
        # Truncate: drop the digits below one base unit
        digits = digits[:shift]
        shift = 0
    if not digits:
        return "0"

    base_units = int("".join(str(d) for d in digits)) * 10**shift
    if base_units > MAX_UINT256:
        raise InvalidAmount(human_amount, "amount too large")

    return str(base_units)


def from_base_units(amount: str, decimals: int) -> Decimal:
    """Format a base-unit amount back into human units for display."""
    return Decimal(int(amount)).scaleb(-decimals)
