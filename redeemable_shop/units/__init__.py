"""
Units module - Factories and pure functions for the shop's units.

- Redeemable species with linear pricing, purchase and giveaway
- Currency funding

All unit factories and related functions are re-exported here for convenience.
"""

from .redeemable import (
    Redeemable,
    REDEEMABLE_PREFIX,
    redeemable_symbol,
    create_redeemable_unit,
    num_redeemable,
    get_redeemable,
    compute_create_redeemable,
    compute_price,
    current_price,
    cost_of_purchases,
    price_schedule,
    compute_set_base_price,
    compute_set_increment,
    compute_set_max_buy_date,
    compute_set_redeem_date,
    compute_buy,
    compute_giveaway,
)

from .currency import compute_deposit
