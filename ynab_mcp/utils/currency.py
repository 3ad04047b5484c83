"""
Milliunit Conversion

YNAB stores every amount as an integer number of milliunits:
1000 milliunits = 1.00 in the budget's currency.
"""

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

MILLIUNITS_PER_UNIT = 1000

Amount = Union[Decimal, float, int, str]


def amount_to_milliunits(amount: Amount) -> int:
    """Convert a display amount to integer milliunits (banker's rounding)."""
    value = Decimal(str(amount)) * MILLIUNITS_PER_UNIT
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def milliunits_to_amount(milliunits: int) -> Decimal:
    """Convert integer milliunits to a display amount."""
    return (Decimal(milliunits) / MILLIUNITS_PER_UNIT).quantize(Decimal("0.001"))
