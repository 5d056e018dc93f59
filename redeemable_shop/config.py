"""
config.py - Shop configuration and currency denominations

All amounts in the shop are ints of the smallest currency unit (wei).
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Union


WEI_PER_ETHER = 10 ** 18

DENOMINATIONS = {
    'wei': 1,
    'kwei': 10 ** 3,
    'mwei': 10 ** 6,
    'gwei': 10 ** 9,
    'szabo': 10 ** 12,
    'finney': 10 ** 15,
    'ether': WEI_PER_ETHER,
}

# Catalog defaults, priced on 2018-09-24: about 10$ a unit, 40 cents per sale
DEFAULT_BASE_PRICE = 43_000_000_000_000_000       # 0.043 ether
DEFAULT_INCREMENT = 1_700_000_000_000_000         # 0.0017 ether

VERY_FAR_DATE = 32522601600                       # year 3000
VERY_FAR_DATE_PLUS_ONE_YEAR = 32546188800         # year 3001


def to_wei(amount: Union[int, str, Decimal], unit: str = 'ether') -> int:
    """
    Convert an amount in a denomination to an exact int of wei.

    Floats are accepted through their str() form, so to_wei(0.043) is
    43000000000000000 and not the binary float's expansion.

    Raises:
        ValueError: If the unit is unknown, the amount is negative, or it
            is not a whole number of wei.
    """
    if unit not in DENOMINATIONS:
        raise ValueError(f"Unknown denomination {unit!r}")
    try:
        value = Decimal(str(amount)) * DENOMINATIONS[unit]
    except InvalidOperation:
        raise ValueError(f"Not a number: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"Not a number: {amount!r}")
    if value < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if value != value.to_integral_value():
        raise ValueError(f"{amount} {unit} is not a whole number of wei")
    return int(value)


@dataclass
class ShopConfig:
    """Settings for a RedeemableShop and the ledger it runs on."""
    name: str = "redeemable_shop"
    currency_symbol: str = "ETH"
    currency_name: str = "Ether"
    initial_time: datetime = datetime(2018, 9, 24)
    verbose: bool = False
