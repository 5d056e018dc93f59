"""
currency.py - Funding wallets with the shop currency

Currency enters the ledger only by issuance from the system wallet, so the
total supply of the currency unit (system included) is always zero.
"""

from __future__ import annotations
from decimal import Decimal

from ..core import (
    LedgerView, Move, PendingTransaction, MAX_AMOUNT, SYSTEM_WALLET,
    build_transaction,
)
from ..access import get_shop_state, shop_state_change, command_origin, require_address


def compute_deposit(view: LedgerView, wallet: str, amount: int) -> PendingTransaction:
    """
    Issue amount of the shop currency to wallet.

    The currency issued over the life of the ledger is capped at MAX_AMOUNT.

    Raises:
        ValueError: If amount is not a positive int, the cap would be
            exceeded, or wallet is empty/system.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValueError(f"amount must be a positive int, got {amount!r}")
    require_address("wallet", wallet)

    currency_symbol = get_shop_state(view)['currency']
    issued = -view.get_balance(SYSTEM_WALLET, currency_symbol)
    if issued + amount > MAX_AMOUNT:
        raise ValueError(
            f"deposit of {amount} would take issued {currency_symbol} past {MAX_AMOUNT}"
        )

    moves = [
        Move(
            quantity=Decimal(amount),
            unit_symbol=currency_symbol,
            source=SYSTEM_WALLET,
            dest=wallet,
            contract_id=f'deposit_{wallet}',
        ),
    ]
    return build_transaction(
        view, moves, [shop_state_change(view)],
        origin=command_origin(SYSTEM_WALLET, "DEPOSIT", currency_symbol),
    )
