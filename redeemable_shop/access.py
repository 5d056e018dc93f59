"""
access.py - Shop control unit and role checks

The shop keeps its roles and switches in the state of a single control unit
(SHOP_SYMBOL) so they change through the same atomic transactions as the
catalog and balances:

    owner           CLevel address: catalog, setters, pause, CFO assignment
    cfo             giveaway role and recipient of purchase funds
    paused          while True, buy and giveaway are rejected
    currency        symbol of the unit purchases are paid in
    num_redeemable  catalog size, the next id to create
    redeem_logic    address of the redemption collaborator (None until set)
    nonce           command counter, bumped by every shop command

Every command touches the control unit through shop_state_change(), which
bumps the nonce. Two otherwise identical commands (pause, unpause, pause)
therefore never share an intent_id and are never deduplicated by the ledger.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Optional, Protocol, runtime_checkable

from .core import (
    LedgerView, PendingTransaction, Unit, UnitState, UnitStateChange,
    TransactionOrigin, OriginType,
    SYSTEM_WALLET, UNIT_TYPE_SHOP_CONTROL,
    Unauthorized, ContractPaused, ContractNotPaused, InvalidRedeemLogic,
    build_transaction, _freeze_state,
)


SHOP_SYMBOL = "SHOP"


@runtime_checkable
class RedeemLogic(Protocol):
    """
    Interface an external redemption collaborator must implement.

    The shop only records the collaborator's address; it never calls
    redeem() itself.
    """

    address: str

    def is_redeem_logic(self) -> bool:
        ...

    def redeem(self, view: LedgerView, redeemable_id: int, owner: str, quantity: int) -> PendingTransaction:
        ...


def create_shop_unit(owner: str, currency_symbol: str, cfo: Optional[str] = None) -> Unit:
    """
    Create the shop control unit.

    Args:
        owner: CLevel address.
        currency_symbol: Unit purchases are paid in.
        cfo: Initial CFO address (defaults to the owner).

    Raises:
        ValueError: If owner or currency_symbol is empty, or owner or cfo
            is the system wallet.
    """
    require_address("owner", owner)
    if cfo is not None:
        require_address("cfo", cfo)
    if not currency_symbol or not currency_symbol.strip():
        raise ValueError("currency_symbol cannot be empty")

    return Unit(
        symbol=SHOP_SYMBOL,
        name="Redeemable Shop",
        unit_type=UNIT_TYPE_SHOP_CONTROL,
        min_balance=Decimal("0"),
        max_balance=Decimal("0"),
        _frozen_state=_freeze_state({
            'owner': owner,
            'cfo': cfo or owner,
            'paused': False,
            'currency': currency_symbol,
            'num_redeemable': 0,
            'redeem_logic': None,
            'nonce': 0,
        }),
    )


def get_shop_state(view: LedgerView) -> UnitState:
    return view.get_unit_state(SHOP_SYMBOL)


def shop_state_change(view: LedgerView, **updates: Any) -> UnitStateChange:
    """Build a control unit change applying updates and bumping the nonce."""
    state = get_shop_state(view)
    new_state = {**state, **updates, 'nonce': state['nonce'] + 1}
    return UnitStateChange(unit=SHOP_SYMBOL, old_state=state, new_state=new_state)


def command_origin(caller: str, event_type: str, unit_symbol: Optional[str] = None) -> TransactionOrigin:
    """Origin of a shop command. Commands issued by the system wallet are SYSTEM."""
    return TransactionOrigin(
        origin_type=OriginType.SYSTEM if caller == SYSTEM_WALLET else OriginType.USER_ACTION,
        source_id=caller,
        unit_symbol=unit_symbol,
        event_type=event_type,
    )


# ============================================================================
# ROLE CHECKS
# ============================================================================

def is_clevel(view: LedgerView, address: str) -> bool:
    return get_shop_state(view)['owner'] == address


def is_cfo(view: LedgerView, address: str) -> bool:
    return get_shop_state(view)['cfo'] == address


def is_paused(view: LedgerView) -> bool:
    return bool(get_shop_state(view)['paused'])


def require_address(role: str, address: str) -> None:
    """Reject empty addresses and the reserved system wallet."""
    if not isinstance(address, str) or not address.strip():
        raise ValueError(f"{role} cannot be empty")
    if address == SYSTEM_WALLET:
        raise ValueError(f"{role} cannot be the system wallet")


def require_clevel(view: LedgerView, caller: str) -> None:
    """Raises Unauthorized unless caller is the CLevel owner."""
    if not is_clevel(view, caller):
        raise Unauthorized(f"{caller} is not CLevel")


def require_cfo(view: LedgerView, caller: str) -> None:
    """Raises Unauthorized unless caller is the CFO."""
    if not is_cfo(view, caller):
        raise Unauthorized(f"{caller} is not the CFO")


def require_not_paused(view: LedgerView) -> None:
    """Raises ContractPaused while the shop is paused."""
    if is_paused(view):
        raise ContractPaused("Shop is paused")


# ============================================================================
# CONTROL COMMANDS
# ============================================================================

def compute_pause(view: LedgerView, caller: str) -> PendingTransaction:
    """
    Pause the shop. CLevel only.

    Raises:
        Unauthorized: If caller is not CLevel.
        ContractPaused: If the shop is already paused.
    """
    require_clevel(view, caller)
    require_not_paused(view)
    return build_transaction(
        view, [],
        [shop_state_change(view, paused=True)],
        origin=command_origin(caller, "PAUSE", SHOP_SYMBOL),
    )


def compute_unpause(view: LedgerView, caller: str) -> PendingTransaction:
    """
    Resume a paused shop. CLevel only.

    Raises:
        Unauthorized: If caller is not CLevel.
        ContractNotPaused: If the shop is running.
    """
    require_clevel(view, caller)
    if not is_paused(view):
        raise ContractNotPaused("Shop is not paused")
    return build_transaction(
        view, [],
        [shop_state_change(view, paused=False)],
        origin=command_origin(caller, "UNPAUSE", SHOP_SYMBOL),
    )


def compute_set_cfo(view: LedgerView, new_cfo: str, caller: str) -> PendingTransaction:
    """
    Assign the CFO role. CLevel only.

    Raises:
        Unauthorized: If caller is not CLevel.
        ValueError: If new_cfo is empty or the system wallet.
    """
    require_clevel(view, caller)
    require_address("cfo", new_cfo)
    return build_transaction(
        view, [],
        [shop_state_change(view, cfo=new_cfo)],
        origin=command_origin(caller, "SET_CFO", SHOP_SYMBOL),
    )


def compute_set_redeem_logic(view: LedgerView, candidate: Any, caller: str) -> PendingTransaction:
    """
    Record the redemption collaborator. CLevel only.

    A candidate is accepted only if it implements RedeemLogic and its
    is_redeem_logic() returns True. Plain addresses are refused.

    Raises:
        Unauthorized: If caller is not CLevel.
        InvalidRedeemLogic: If candidate does not implement the interface.
    """
    require_clevel(view, caller)
    if not isinstance(candidate, RedeemLogic) or candidate.is_redeem_logic() is not True:
        raise InvalidRedeemLogic(f"{candidate!r} does not implement redeem logic")
    if not isinstance(candidate.address, str) or not candidate.address.strip():
        raise InvalidRedeemLogic("redeem logic address cannot be empty")
    return build_transaction(
        view, [],
        [shop_state_change(view, redeem_logic=candidate.address)],
        origin=command_origin(caller, "SET_REDEEM_LOGIC", SHOP_SYMBOL),
    )
