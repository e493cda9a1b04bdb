"""Display rounding for Decimal amounts.

Calculations keep full Decimal precision; these helpers are applied once,
when a result leaves the library for display or serialization.
"""

from decimal import ROUND_HALF_UP, Decimal

# ISO 4217 minor-unit exponents that differ from the usual 2
CURRENCY_EXPONENTS: dict[str, int] = {
    "JPY": 0,
    "KRW": 0,
    "ISK": 0,
    "CLP": 0,
    "BHD": 3,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
}
DEFAULT_EXPONENT = 2


def minor_unit_exponent(currency: str) -> int:
    """Number of decimal places used by a currency."""
    return CURRENCY_EXPONENTS.get(currency.upper(), DEFAULT_EXPONENT)


def round_money(amount: Decimal, currency: str = "EUR") -> Decimal:
    """Round an amount half-up to the currency's minor unit.

    Args:
        amount: Unrounded amount
        currency: ISO 4217 currency code

    Returns:
        Amount quantized to the currency's precision
    """
    exponent = minor_unit_exponent(currency)
    return amount.quantize(Decimal(1).scaleb(-exponent), rounding=ROUND_HALF_UP)


def round_percentage(value: Decimal, places: int = 2) -> Decimal:
    """Round a percentage half-up for display."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
