#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Redeemable Shop Step by Step

This is a pedagogical demonstration of how the redeemable shop works.
Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:   Foundation     - Opening a shop, roles, the first redeemable
  4-6:   Trading        - Linear pricing, overpayment, rejected purchases
  7-8:   Administration - Giveaways, repricing, pausing
  9-10:  Time           - Purchase deadlines, snapshot and revert

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
from datetime import datetime
import sys

from redeemable_shop import (
    RedeemableShop, ShopConfig, ShopError,
    to_wei, cost_of_purchases,
    DEFAULT_BASE_PRICE, DEFAULT_INCREMENT,
    VERY_FAR_DATE, VERY_FAR_DATE_PLUS_ONE_YEAR,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    start_time: datetime = datetime(2018, 9, 24, 12, 0, 0)

    owner: str = "ceo"
    cfo: str = "cfo"
    alice: str = "alice"
    bob: str = "bob"

    # Initial funding, in ether
    alice_initial_ether: str = "10"
    bob_initial_ether: str = "10"

    purchases: int = 3
    giveaway_quantity: int = 5


CONFIG = DemoConfig()

# Global state for interactive mode
QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def ether(wei: int) -> str:
    return f"{wei / 10 ** 18:.4f} ETH"


# ============================================================================
# PHASE 1: FOUNDATION (Steps 1-3)
# ============================================================================

def step_01_open_shop() -> RedeemableShop:
    """Open a shop and look at its roles."""
    step_header(1, "Opening the Shop",
        "A shop starts with an owner (CLevel), a CFO and an empty catalog.")

    print(f">>> shop = RedeemableShop('{CONFIG.owner}', ShopConfig(initial_time=...))")
    shop = RedeemableShop(CONFIG.owner, ShopConfig(name="tutorial", initial_time=CONFIG.start_time))

    section_header("Initial State")
    print(f"Owner (CLevel):   {shop.owner_address()}")
    print(f"CFO:              {shop.cfo_address()}  (defaults to the owner)")
    print(f"Redeemables:      {shop.num_redeemable()}")
    print(f"Paused:           {shop.is_paused()}")
    print(f"Current time:     {shop.now()} (unix)")

    print(f"\n>>> shop.set_cfo('{CONFIG.cfo}', caller='{CONFIG.owner}')")
    shop.set_cfo(CONFIG.cfo, caller=CONFIG.owner)
    print(f"CFO:              {shop.cfo_address()}")

    section_header("Key Insight")
    print("""
    Every command names its caller. Roles live in the SHOP control unit and
    change through the same atomic transactions as balances do.
    """)
    return shop


def step_02_create_redeemable(shop: RedeemableShop) -> RedeemableShop:
    """Create redeemable 0 with the default price curve."""
    step_header(2, "The First Redeemable",
        "Ids are sequential: the next id is always the current catalog size.")

    print(">>> shop.create(0, DEFAULT_BASE_PRICE, DEFAULT_INCREMENT,")
    print("...             VERY_FAR_DATE, VERY_FAR_DATE_PLUS_ONE_YEAR, caller='ceo')")
    shop.create(0, DEFAULT_BASE_PRICE, DEFAULT_INCREMENT,
                VERY_FAR_DATE, VERY_FAR_DATE_PLUS_ONE_YEAR, caller=CONFIG.owner)

    r = shop.get(0)
    section_header("Redeemable 0")
    print(f"Base price:     {ether(r.base_price)}")
    print(f"Increment:      {ether(r.increment)}")
    print(f"Units sold:     {r.num_units_sold}")
    print(f"Max buy date:   {r.max_buy_date}")
    print(f"Redeem date:    {r.redeem_date}")

    section_header("Creating Out of Order")
    try:
        shop.create(5, 1, 1, VERY_FAR_DATE, VERY_FAR_DATE, caller=CONFIG.owner)
    except ShopError as e:
        print(f"create(5, ...) raised {type(e).__name__}: {e}")
    return shop


def step_03_fund_buyers(shop: RedeemableShop) -> RedeemableShop:
    """Fund the buyers with currency issued from the system wallet."""
    step_header(3, "Funding Buyers",
        "Currency enters circulation only by issuance from the system wallet.")

    shop.deposit(CONFIG.alice, to_wei(CONFIG.alice_initial_ether))
    shop.deposit(CONFIG.bob, to_wei(CONFIG.bob_initial_ether))
    print(f"alice: {ether(shop.balance_of(CONFIG.alice))}")
    print(f"bob:   {ether(shop.balance_of(CONFIG.bob))}")
    print(f"Total ETH supply, system included: {shop.ledger.total_supply('ETH')}")
    return shop


# ============================================================================
# PHASE 2: TRADING (Steps 4-6)
# ============================================================================

def step_04_linear_pricing(shop: RedeemableShop) -> RedeemableShop:
    """Buy several units and watch the price climb."""
    step_header(4, "Linear Pricing",
        "price = base_price + increment * num_units_sold")

    print(f"Next {CONFIG.purchases} prices: {[ether(p) for p in shop.price_schedule(0, CONFIG.purchases)]}")
    for _ in range(CONFIG.purchases):
        price = shop.current_price(0)
        shop.buy(0, caller=CONFIG.alice, paid=price)
        print(f"alice bought one unit for {ether(price)}")

    section_header("After the Purchases")
    print(f"alice owns:     {shop.owned_quantity(CONFIG.alice, 0)}")
    print(f"Next price:     {ether(shop.current_price(0))}")
    print(f"CFO received:   {ether(shop.balance_of(CONFIG.cfo))}")
    expected = cost_of_purchases(DEFAULT_BASE_PRICE, DEFAULT_INCREMENT, 0, CONFIG.purchases)
    print(f"cost_of_purchases(...) = {ether(expected)}")
    return shop


def step_05_overpayment(shop: RedeemableShop) -> RedeemableShop:
    """Attach more than the price; only the price is charged."""
    step_header(5, "Overpayment",
        "The excess over the price is returned: only the price leaves the wallet.")

    before = shop.balance_of(CONFIG.bob)
    price = shop.current_price(0)
    print(f">>> shop.buy(0, caller='bob', paid=to_wei(1))   # price is {ether(price)}")
    shop.buy(0, caller=CONFIG.bob, paid=to_wei(1))
    print(f"bob paid {ether(before - shop.balance_of(CONFIG.bob))}")
    return shop


def step_06_rejections(shop: RedeemableShop) -> RedeemableShop:
    """See rejected purchases leave everything untouched."""
    step_header(6, "Rejected Purchases",
        "A rejected command raises and changes NOTHING.")

    log_length = len(shop.ledger.transaction_log)
    price = shop.current_price(0)
    for label, command in [
        ("one wei short", lambda: shop.buy(0, caller=CONFIG.bob, paid=price - 1)),
        ("unknown redeemable", lambda: shop.buy(7, caller=CONFIG.bob, paid=price)),
        ("giveaway by the owner", lambda: shop.giveaway(0, 1, CONFIG.bob, caller=CONFIG.owner)),
    ]:
        try:
            command()
        except ShopError as e:
            print(f"{label:24s} -> {type(e).__name__}")
    print(f"\nTransaction log length unchanged: {len(shop.ledger.transaction_log) == log_length}")
    return shop


# ============================================================================
# PHASE 3: ADMINISTRATION (Steps 7-8)
# ============================================================================

def step_07_giveaway_and_reprice(shop: RedeemableShop) -> RedeemableShop:
    """The CFO gives units away and the owner changes the terms."""
    step_header(7, "Giveaways and Repricing",
        "Giveaways never move the price; term changes apply to the next unit.")

    price = shop.current_price(0)
    shop.giveaway(0, CONFIG.giveaway_quantity, receiver=CONFIG.bob, caller=CONFIG.cfo)
    print(f"bob received {CONFIG.giveaway_quantity} units; price still {ether(price)}: "
          f"{shop.current_price(0) == price}")

    shop.set_increment(0, to_wei("0.01"), caller=CONFIG.owner)
    print(f"Increment set to 0.01 ETH; next price is now {ether(shop.current_price(0))}")
    r = shop.get(0)
    print(f"Units sold: {r.num_units_sold}, units given: {r.num_units_given}")
    return shop


def step_08_pause(shop: RedeemableShop) -> RedeemableShop:
    """Pause trading and resume it."""
    step_header(8, "Pausing",
        "While paused, purchases and giveaways are refused.")

    shop.pause(caller=CONFIG.owner)
    try:
        shop.buy(0, caller=CONFIG.alice, paid=to_wei(1))
    except ShopError as e:
        print(f"buy while paused -> {type(e).__name__}")
    shop.unpause(caller=CONFIG.owner)
    print(f"Paused after unpause: {shop.is_paused()}")
    return shop


# ============================================================================
# PHASE 4: TIME (Steps 9-10)
# ============================================================================

def step_09_deadline(shop: RedeemableShop) -> RedeemableShop:
    """Close sales with max_buy_date and move the clock past it."""
    step_header(9, "Purchase Deadlines",
        "Purchases succeed up to and including max_buy_date.")

    deadline = shop.now() + 3600
    shop.set_max_buy_date(0, deadline, caller=CONFIG.owner)
    shop.increase_time(3600)
    shop.buy(0, caller=CONFIG.alice, paid=shop.current_price(0))
    print(f"At the deadline ({deadline}) the purchase succeeded")
    shop.increase_time(1)
    try:
        shop.buy(0, caller=CONFIG.alice, paid=to_wei(1))
    except ShopError as e:
        print(f"One second later -> {type(e).__name__}")
    return shop


def step_10_snapshot(shop: RedeemableShop) -> RedeemableShop:
    """Snapshot the shop, trade, and revert."""
    step_header(10, "Snapshot and Revert",
        "revert() restores every balance, counter, role and the clock.")

    shop.set_max_buy_date(0, VERY_FAR_DATE, caller=CONFIG.owner)
    sid = shop.snapshot()
    owned = shop.owned_quantity(CONFIG.bob, 0)
    print(f"snapshot() -> {sid}; bob owns {owned}")
    shop.buy(0, caller=CONFIG.bob, paid=shop.current_price(0))
    print(f"After buying, bob owns {shop.owned_quantity(CONFIG.bob, 0)}")
    shop.revert(sid)
    print(f"After revert({sid}), bob owns {shop.owned_quantity(CONFIG.bob, 0)}")

    section_header("Conservation Proof")
    report = shop.ledger.verify_double_entry()
    for unit, supply in sorted(report['supplies'].items()):
        print(f"  {unit:15s} total supply = {supply}")
    print(f"Valid: {report['valid']}")
    return shop


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       REDEEMABLE SHOP - INTERACTIVE TUTORIAL")
    print("=" * 70)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    wait_for_enter()

    shop = step_01_open_shop()
    wait_for_enter()

    for step in (
        step_02_create_redeemable,
        step_03_fund_buyers,
        step_04_linear_pricing,
        step_05_overpayment,
        step_06_rejections,
        step_07_giveaway_and_reprice,
        step_08_pause,
        step_09_deadline,
        step_10_snapshot,
    ):
        shop = step(shop)
        wait_for_enter()

    print("\n" + "=" * 70)
    print("       TUTORIAL COMPLETE!")
    print("=" * 70)
    print(repr(shop))
    return shop


if __name__ == "__main__":
    main()
