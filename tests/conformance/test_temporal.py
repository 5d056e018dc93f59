"""
Temporal Conformance Tests

INVARIANT: Purchases are accepted up to and including max_buy_date.

    ∀ redeemable R, ledger time t:
        t ≤ R.max_buy_date ⟹ buy may succeed
        t > R.max_buy_date ⟹ buy raises PastMaxBuyDate

The clock only moves forward, except through revert().
"""

import pytest
from datetime import timedelta
from hypothesis import given, settings
from hypothesis import strategies as st

from redeemable_shop import (
    RedeemableShop, ShopConfig, PastMaxBuyDate, unix_timestamp, to_wei,
    DEFAULT_BASE_PRICE, DEFAULT_INCREMENT, VERY_FAR_DATE_PLUS_ONE_YEAR,
)
from tests.shop_helpers import START_TIME, OWNER, CFO, BUYER, RECEIVER


def _new_shop(max_buy_date: int) -> RedeemableShop:
    shop = RedeemableShop(OWNER, ShopConfig(initial_time=START_TIME))
    shop.set_cfo(CFO, caller=OWNER)
    shop.create(0, DEFAULT_BASE_PRICE, DEFAULT_INCREMENT, max_buy_date,
                VERY_FAR_DATE_PLUS_ONE_YEAR, caller=OWNER)
    shop.deposit(BUYER, to_wei(1))
    return shop


class TestTemporalProperties:

    @given(offset=st.integers(min_value=0, max_value=10 ** 7),
           elapsed=st.integers(min_value=0, max_value=10 ** 7))
    @settings(max_examples=50, deadline=None)
    def test_deadline_is_inclusive(self, offset, elapsed):
        """
        PROPERTY: buy succeeds iff now <= max_buy_date.
        """
        deadline = unix_timestamp(START_TIME) + offset
        shop = _new_shop(deadline)
        now = shop.increase_time(elapsed)
        if now <= deadline:
            shop.buy(0, caller=BUYER, paid=DEFAULT_BASE_PRICE)
            assert shop.owned_quantity(BUYER, 0) == 1
        else:
            with pytest.raises(PastMaxBuyDate):
                shop.buy(0, caller=BUYER, paid=DEFAULT_BASE_PRICE)


class TestTemporalExamples:

    def test_extending_deadline_reopens_sales(self):
        deadline = unix_timestamp(START_TIME)
        shop = _new_shop(deadline)
        shop.increase_time(10)
        with pytest.raises(PastMaxBuyDate):
            shop.buy(0, caller=BUYER, paid=DEFAULT_BASE_PRICE)
        shop.set_max_buy_date(0, deadline + 10, caller=OWNER)
        shop.buy(0, caller=BUYER, paid=DEFAULT_BASE_PRICE)

    def test_giveaway_after_deadline(self):
        shop = _new_shop(unix_timestamp(START_TIME))
        shop.increase_time(10)
        shop.giveaway(0, 1, receiver=RECEIVER, caller=CFO)
        assert shop.owned_quantity(RECEIVER, 0) == 1

    def test_revert_rewinds_clock(self):
        shop = _new_shop(unix_timestamp(START_TIME))
        sid = shop.snapshot()
        shop.increase_time(10)
        shop.revert(sid)
        assert shop.ledger.current_time == START_TIME
        shop.buy(0, caller=BUYER, paid=DEFAULT_BASE_PRICE)

    def test_receipts_carry_execution_time(self):
        shop = _new_shop(unix_timestamp(START_TIME) + 3600)
        shop.increase_time(60)
        tx = shop.buy(0, caller=BUYER, paid=DEFAULT_BASE_PRICE)
        assert tx.execution_time == START_TIME + timedelta(seconds=60)
