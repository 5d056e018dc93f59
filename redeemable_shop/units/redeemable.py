"""
redeemable.py - Redeemable Units with Linear Pricing

This module provides the catalog, the pricing engine and purchase settlement:
1. create_redeemable_unit() - Factory for a species unit
2. compute_create_redeemable() - Sequential catalog creation (CLevel)
3. get_redeemable() / current_price() - Catalog and price queries
4. compute_set_base_price() and friends - Term setters (CLevel)
5. compute_buy() - Paid purchase settling to the CFO
6. compute_giveaway() - Free allocation by the CFO

Each species is a Unit whose state holds its terms and counters. Owning a
redeemable means holding its unit: purchases and giveaways issue units from
the system wallet, and the issuance-only transfer rule keeps them there.

Price of the next unit:

    price = base_price + increment * num_units_sold

Only paid purchases advance num_units_sold. Giveaways are counted separately
in num_units_given and never move the price.

All functions take LedgerView (read-only) and return immutable results.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from ..core import (
    LedgerView, Move, PendingTransaction, Unit, UnitStateChange,
    MAX_AMOUNT, SYSTEM_WALLET, UNIT_TYPE_REDEEMABLE,
    NotFound, DuplicateOrNonSequentialId, PastMaxBuyDate,
    InsufficientPayment, InsufficientFunds, InvalidQuantity,
    build_transaction, issuance_only_transfer_rule, unix_timestamp,
    _freeze_state,
)
from ..access import (
    get_shop_state, shop_state_change, command_origin,
    require_address, require_clevel, require_cfo, require_not_paused,
)


REDEEMABLE_PREFIX = "REDEEMABLE_"


def redeemable_symbol(redeemable_id: int) -> str:
    """Unit symbol of a species, e.g. REDEEMABLE_0."""
    return f"{REDEEMABLE_PREFIX}{redeemable_id}"


@dataclass(frozen=True, slots=True)
class Redeemable:
    """Read-only snapshot of a species' terms and counters."""
    id: int
    base_price: int
    increment: int
    num_units_sold: int
    max_buy_date: int
    redeem_date: int
    num_units_given: int = 0

    @property
    def price(self) -> int:
        return compute_price(self.base_price, self.increment, self.num_units_sold)

    @classmethod
    def from_state(cls, state: dict) -> Redeemable:
        return cls(
            id=state['id'],
            base_price=state['base_price'],
            increment=state['increment'],
            num_units_sold=state['num_units_sold'],
            max_buy_date=state['max_buy_date'],
            redeem_date=state['redeem_date'],
            num_units_given=state.get('num_units_given', 0),
        )


def _require_non_negative_int(name: str, value) -> None:
    # bool is an int subclass; True is not a price
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    if value > MAX_AMOUNT:
        raise ValueError(f"{name} must not exceed {MAX_AMOUNT}, got {value}")


def create_redeemable_unit(
    redeemable_id: int,
    base_price: int,
    increment: int,
    max_buy_date: int,
    redeem_date: int,
) -> Unit:
    """
    Create the unit for one species.

    Args:
        redeemable_id: Sequential catalog id
        base_price: Price of the first unit, in the smallest currency unit
        increment: Price added per unit sold
        max_buy_date: Unix timestamp after which purchases are rejected
        redeem_date: Unix timestamp of redemption (informational)

    Returns:
        Unit with num_units_sold = 0, whole-unit balances and the
        issuance-only transfer rule.

    Raises:
        ValueError: If any argument is not a non-negative int.
    """
    _require_non_negative_int("redeemable_id", redeemable_id)
    _require_non_negative_int("base_price", base_price)
    _require_non_negative_int("increment", increment)
    _require_non_negative_int("max_buy_date", max_buy_date)
    _require_non_negative_int("redeem_date", redeem_date)

    return Unit(
        symbol=redeemable_symbol(redeemable_id),
        name=f"Redeemable #{redeemable_id}",
        unit_type=UNIT_TYPE_REDEEMABLE,
        min_balance=Decimal("0"),
        decimal_places=0,
        transfer_rule=issuance_only_transfer_rule,
        _frozen_state=_freeze_state({
            'id': redeemable_id,
            'base_price': base_price,
            'increment': increment,
            'num_units_sold': 0,
            'num_units_given': 0,
            'max_buy_date': max_buy_date,
            'redeem_date': redeem_date,
        }),
    )


# ============================================================================
# CATALOG
# ============================================================================

def num_redeemable(view: LedgerView) -> int:
    return get_shop_state(view)['num_redeemable']


def _require_exists(view: LedgerView, redeemable_id: int) -> str:
    """Return the species symbol, or raise NotFound."""
    if (
        isinstance(redeemable_id, bool)
        or not isinstance(redeemable_id, int)
        or redeemable_id < 0
        or redeemable_id >= num_redeemable(view)
    ):
        raise NotFound(f"Redeemable {redeemable_id!r} does not exist")
    return redeemable_symbol(redeemable_id)


def get_redeemable(view: LedgerView, redeemable_id: int) -> Redeemable:
    """
    Return the terms and counters of a species.

    Raises:
        NotFound: If redeemable_id is not in [0, num_redeemable).
    """
    symbol = _require_exists(view, redeemable_id)
    return Redeemable.from_state(view.get_unit_state(symbol))


def compute_create_redeemable(
    view: LedgerView,
    redeemable_id: int,
    base_price: int,
    increment: int,
    max_buy_date: int,
    redeem_date: int,
    caller: str,
) -> PendingTransaction:
    """
    Append a species to the catalog.

    The new unit is registered and num_redeemable advanced in the same
    transaction.

    Raises:
        Unauthorized: If caller is not CLevel.
        DuplicateOrNonSequentialId: If redeemable_id != num_redeemable.
        ValueError: If a term is not a non-negative int.
    """
    require_clevel(view, caller)
    expected_id = num_redeemable(view)
    if redeemable_id != expected_id or isinstance(redeemable_id, bool):
        raise DuplicateOrNonSequentialId(
            f"Redeemable id must be {expected_id}, got {redeemable_id!r}"
        )
    unit = create_redeemable_unit(redeemable_id, base_price, increment, max_buy_date, redeem_date)
    return build_transaction(
        view, [],
        [shop_state_change(view, num_redeemable=expected_id + 1)],
        origin=command_origin(caller, "CREATE", unit.symbol),
        units_to_create=(unit,),
    )


# ============================================================================
# PRICING
# ============================================================================

def compute_price(base_price: int, increment: int, num_units_sold: int) -> int:
    """Price of the next unit after num_units_sold paid purchases."""
    return base_price + increment * num_units_sold


def current_price(view: LedgerView, redeemable_id: int) -> int:
    """
    Price of the next unit of a species, recomputed from stored state.

    Raises:
        NotFound: If the species does not exist.
    """
    return get_redeemable(view, redeemable_id).price


def cost_of_purchases(base_price: int, increment: int, units_sold: int, count: int) -> int:
    """
    Exact total paid for the next count purchases, with no term changes between them.

    Sum over i in [units_sold, units_sold + count) of base_price + increment * i.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    # Arithmetic series; the product of consecutive ints is always even
    index_sum = (count * (2 * units_sold + count - 1)) // 2
    return base_price * count + increment * index_sum


def price_schedule(view: LedgerView, redeemable_id: int, count: int) -> List[int]:
    """Prices of the next count purchases of a species, in order."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    r = get_redeemable(view, redeemable_id)
    return [
        compute_price(r.base_price, r.increment, r.num_units_sold + i)
        for i in range(count)
    ]


def _compute_set_field(
    view: LedgerView,
    redeemable_id: int,
    field_name: str,
    value: int,
    caller: str,
    event_type: str,
) -> PendingTransaction:
    require_clevel(view, caller)
    symbol = _require_exists(view, redeemable_id)
    _require_non_negative_int(field_name, value)
    state = view.get_unit_state(symbol)
    new_state = {**state, field_name: value}
    return build_transaction(
        view, [],
        [
            UnitStateChange(unit=symbol, old_state=state, new_state=new_state),
            shop_state_change(view),
        ],
        origin=command_origin(caller, event_type, symbol),
    )


def compute_set_base_price(view: LedgerView, redeemable_id: int, value: int, caller: str) -> PendingTransaction:
    """Overwrite base_price. CLevel only; raises Unauthorized / NotFound."""
    return _compute_set_field(view, redeemable_id, 'base_price', value, caller, "SET_BASE_PRICE")


def compute_set_increment(view: LedgerView, redeemable_id: int, value: int, caller: str) -> PendingTransaction:
    """Overwrite increment. CLevel only; raises Unauthorized / NotFound."""
    return _compute_set_field(view, redeemable_id, 'increment', value, caller, "SET_INCREMENT")


def compute_set_max_buy_date(view: LedgerView, redeemable_id: int, value: int, caller: str) -> PendingTransaction:
    """Overwrite max_buy_date. CLevel only; raises Unauthorized / NotFound."""
    return _compute_set_field(view, redeemable_id, 'max_buy_date', value, caller, "SET_MAX_BUY_DATE")


def compute_set_redeem_date(view: LedgerView, redeemable_id: int, value: int, caller: str) -> PendingTransaction:
    """Overwrite redeem_date. CLevel only; raises Unauthorized / NotFound."""
    return _compute_set_field(view, redeemable_id, 'redeem_date', value, caller, "SET_REDEEM_DATE")


# ============================================================================
# SETTLEMENT
# ============================================================================

def compute_buy(
    view: LedgerView,
    redeemable_id: int,
    buyer: str,
    paid: int,
) -> PendingTransaction:
    """
    Buy one unit of a species.

    Checks, in order: shop running, species exists, now <= max_buy_date,
    paid >= current price, buyer holds paid.

    Only the price leaves the buyer's wallet: any excess over the price is
    refunded, i.e. never transferred.

    Args:
        view: Read-only ledger access
        redeemable_id: Species to buy
        buyer: Acting address
        paid: Funds attached to the call, in the smallest currency unit

    Returns:
        PendingTransaction containing:
        - Move of exactly price currency from buyer to CFO (omitted if the
          price is 0 or the buyer is the CFO)
        - Move of one species unit from system to buyer
        - num_units_sold + 1

    Raises:
        ValueError: If paid is not a non-negative int up to MAX_AMOUNT, or
            buyer is empty or the system wallet.
        ContractPaused, NotFound, PastMaxBuyDate, InsufficientPayment,
        InsufficientFunds.
    """
    _require_non_negative_int("paid", paid)
    require_address("buyer", buyer)

    require_not_paused(view)
    symbol = _require_exists(view, redeemable_id)
    state = view.get_unit_state(symbol)
    redeemable = Redeemable.from_state(state)

    now = unix_timestamp(view.current_time)
    if now > redeemable.max_buy_date:
        raise PastMaxBuyDate(
            f"{symbol} could be bought until {redeemable.max_buy_date}, now is {now}"
        )

    price = redeemable.price
    if paid < price:
        raise InsufficientPayment(f"{symbol} costs {price}, paid {paid}")

    shop = get_shop_state(view)
    currency_symbol = shop['currency']
    cfo = shop['cfo']
    held = (
        view.get_balance(buyer, currency_symbol)
        if buyer in view.list_wallets() else Decimal("0")
    )
    if held < paid:
        raise InsufficientFunds(f"{buyer} holds {held} {currency_symbol}, attached {paid}")

    moves = []
    if price > 0 and buyer != cfo:
        moves.append(Move(
            quantity=Decimal(price),
            unit_symbol=currency_symbol,
            source=buyer,
            dest=cfo,
            contract_id=f'buy_{symbol}_payment',
        ))
    moves.append(Move(
        quantity=Decimal(1),
        unit_symbol=symbol,
        source=SYSTEM_WALLET,
        dest=buyer,
        contract_id=f'buy_{symbol}_unit',
    ))

    new_state = {**state, 'num_units_sold': redeemable.num_units_sold + 1}
    state_changes = [
        UnitStateChange(unit=symbol, old_state=state, new_state=new_state),
        shop_state_change(view),
    ]
    return build_transaction(
        view, moves, state_changes,
        origin=command_origin(buyer, "BUY", symbol),
    )


def compute_giveaway(
    view: LedgerView,
    redeemable_id: int,
    quantity: int,
    receiver: str,
    caller: str,
) -> PendingTransaction:
    """
    Allocate quantity units of a species to receiver for free.

    Checks, in order: caller is CFO, quantity >= 1, species exists, shop running.
    num_units_sold, and with it the price, is left unchanged.

    Raises:
        Unauthorized, InvalidQuantity, NotFound, ContractPaused.
        ValueError: If receiver is empty or the system wallet.
    """
    require_cfo(view, caller)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(f"Giveaway quantity must be a positive int, got {quantity!r}")
    symbol = _require_exists(view, redeemable_id)
    require_not_paused(view)
    require_address("receiver", receiver)

    state = view.get_unit_state(symbol)
    issued = state['num_units_sold'] + state.get('num_units_given', 0)
    if issued + quantity > MAX_AMOUNT:
        raise InvalidQuantity(f"{symbol} cannot issue {quantity} more units, {issued} already issued")
    new_state = {**state, 'num_units_given': state.get('num_units_given', 0) + quantity}
    moves = [
        Move(
            quantity=Decimal(quantity),
            unit_symbol=symbol,
            source=SYSTEM_WALLET,
            dest=receiver,
            contract_id=f'giveaway_{symbol}',
        ),
    ]
    state_changes = [
        UnitStateChange(unit=symbol, old_state=state, new_state=new_state),
        shop_state_change(view),
    ]
    return build_transaction(
        view, moves, state_changes,
        origin=command_origin(caller, "GIVEAWAY", symbol),
    )
