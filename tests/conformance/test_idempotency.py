"""
Idempotency Conformance Tests

INVARIANT: A pending transaction is applied at most once.

    ∀ pending transaction P:
        execute(P); execute(P) ≡ execute(P)

Shop commands bump the control unit nonce, so two commands with the same
arguments are different intents and both apply.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from redeemable_shop import (
    RedeemableShop, ShopConfig, ExecuteResult,
    compute_buy, compute_giveaway, compute_deposit, compute_pause,
    to_wei, DEFAULT_BASE_PRICE,
)
from tests.shop_helpers import (
    START_TIME, OWNER, CFO, BUYER, RECEIVER, create_default_redeemable,
)


def _new_shop() -> RedeemableShop:
    shop = RedeemableShop(OWNER, ShopConfig(initial_time=START_TIME))
    shop.set_cfo(CFO, caller=OWNER)
    create_default_redeemable(shop, 0)
    shop.deposit(BUYER, to_wei(10))
    shop.ledger.register_wallet(RECEIVER)
    return shop


class TestIdempotencyExamples:

    def test_replayed_buy_applied_once(self):
        shop = _new_shop()
        pending = compute_buy(shop.ledger, 0, BUYER, DEFAULT_BASE_PRICE)
        assert shop.ledger.execute(pending) == ExecuteResult.APPLIED
        assert shop.ledger.execute(pending) == ExecuteResult.ALREADY_APPLIED
        assert shop.owned_quantity(BUYER, 0) == 1
        assert shop.balance_of(CFO) == DEFAULT_BASE_PRICE

    def test_replayed_giveaway_applied_once(self):
        shop = _new_shop()
        pending = compute_giveaway(shop.ledger, 0, 3, RECEIVER, CFO)
        shop.ledger.execute(pending)
        shop.ledger.execute(pending)
        assert shop.owned_quantity(RECEIVER, 0) == 3

    def test_stale_pending_rejected_after_other_command(self):
        shop = _new_shop()
        first = compute_deposit(shop.ledger, BUYER, 5)
        second = compute_pause(shop.ledger, OWNER)
        assert shop.ledger.execute(first) == ExecuteResult.APPLIED
        # second was built against the nonce first consumed
        assert shop.ledger.execute(second) == ExecuteResult.REJECTED
        assert not shop.is_paused()

    def test_identical_commands_both_apply(self):
        shop = _new_shop()
        shop.pause(caller=OWNER)
        shop.unpause(caller=OWNER)
        shop.pause(caller=OWNER)
        assert shop.is_paused()
        events = [tx.origin.event_type for tx in shop.ledger.transaction_log]
        assert events[-3:] == ["PAUSE", "UNPAUSE", "PAUSE"]


class TestIdempotencyProperties:

    @given(amounts=st.lists(st.integers(min_value=1, max_value=10 ** 18), min_size=1, max_size=8))
    @settings(max_examples=30, deadline=None)
    def test_repeated_deposits_all_apply(self, amounts):
        """
        PROPERTY: Deposits of equal amounts are never deduplicated.
        """
        shop = _new_shop()
        for amount in amounts:
            shop.deposit(RECEIVER, amount)
        assert shop.balance_of(RECEIVER) == sum(amounts)

    @given(times=st.integers(min_value=1, max_value=5))
    @settings(max_examples=10, deadline=None)
    def test_execute_n_times_same_as_once(self, times):
        """
        PROPERTY: Executing the same pending transaction n times equals once.
        """
        shop = _new_shop()
        pending = compute_deposit(shop.ledger, RECEIVER, 7)
        results = [shop.ledger.execute(pending) for _ in range(times)]
        assert results[0] == ExecuteResult.APPLIED
        assert all(r == ExecuteResult.ALREADY_APPLIED for r in results[1:])
        assert shop.balance_of(RECEIVER) == 7
