"""
shop.py - Redeemable Shop facade

RedeemableShop is the request/response surface of the shop. Every command
names its acting address explicitly; the shop builds a PendingTransaction
with the pure functions of access.py and units/, then executes it on its
own Ledger. A command either applies completely or raises and leaves the
ledger untouched.

    shop = RedeemableShop(owner="ceo")
    shop.set_cfo("cfo", caller="ceo")
    shop.create(0, DEFAULT_BASE_PRICE, DEFAULT_INCREMENT,
                VERY_FAR_DATE, VERY_FAR_DATE_PLUS_ONE_YEAR, caller="ceo")
    shop.deposit("alice", to_wei(1))
    shop.buy(0, caller="alice", paid=shop.current_price(0))
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .config import ShopConfig
from .core import (
    ExecuteResult, PendingTransaction, Transaction,
    TransactionRejected, SnapshotNotFound,
    currency, unix_timestamp,
)
from .ledger import Ledger
from .access import (
    create_shop_unit, get_shop_state, require_address,
    compute_pause, compute_unpause, compute_set_cfo, compute_set_redeem_logic,
)
from .units.redeemable import (
    Redeemable, redeemable_symbol,
    get_redeemable, current_price, price_schedule,
    compute_create_redeemable,
    compute_set_base_price, compute_set_increment,
    compute_set_max_buy_date, compute_set_redeem_date,
    compute_buy, compute_giveaway,
)
from .units.currency import compute_deposit


class RedeemableShop:
    """
    A redeemable catalog with linear pricing on top of a Ledger.

    Thread Safety:
        Not thread-safe. Callers serialize commands.
    """

    def __init__(self, owner: str, config: Optional[ShopConfig] = None, cfo: Optional[str] = None):
        """
        Open a shop with a fresh ledger.

        Args:
            owner: CLevel address.
            config: Ledger name, currency and clock settings.
            cfo: Initial CFO (defaults to owner).
        """
        self.config = config or ShopConfig()
        self.ledger = Ledger(
            self.config.name,
            initial_time=self.config.initial_time,
            verbose=self.config.verbose,
        )
        self.ledger.register_unit(currency(self.config.currency_symbol, self.config.currency_name))
        self.ledger.register_unit(create_shop_unit(owner, self.config.currency_symbol, cfo))
        self.ledger.register_wallet(owner)
        if cfo and cfo != owner:
            self.ledger.register_wallet(cfo)
        self._snapshots: Dict[int, Ledger] = {}
        self._next_snapshot_id = 1

    @property
    def currency_symbol(self) -> str:
        return self.config.currency_symbol

    # ========================================================================
    # EXECUTION
    # ========================================================================

    def _submit(self, pending: PendingTransaction, *wallets: str) -> Transaction:
        """
        Execute a pending transaction and return its receipt.

        wallets are registered once the command has passed every check and
        unregistered again if the ledger rejects it, so a rejected command
        never leaves a new wallet behind.
        """
        new_wallets = []
        for address in wallets:
            if not self.ledger.is_registered(address):
                self.ledger.register_wallet(address)
                new_wallets.append(address)
        result = self.ledger.execute(pending)
        if result != ExecuteResult.APPLIED:
            for address in new_wallets:
                self.ledger.unregister_wallet(address)
            reason = self.ledger.last_rejection or result.value
            raise TransactionRejected(f"{pending.origin}: {reason}")
        return self.ledger.transaction_log[-1]

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get(self, redeemable_id: int) -> Redeemable:
        return get_redeemable(self.ledger, redeemable_id)

    def current_price(self, redeemable_id: int) -> int:
        return current_price(self.ledger, redeemable_id)

    def price_schedule(self, redeemable_id: int, count: int) -> List[int]:
        return price_schedule(self.ledger, redeemable_id, count)

    def owned_quantity(self, owner: str, redeemable_id: int) -> int:
        """Units of a species held by owner (0 for unknown addresses)."""
        require_address("owner", owner)
        symbol = redeemable_symbol(get_redeemable(self.ledger, redeemable_id).id)
        if not self.ledger.is_registered(owner):
            return 0
        return int(self.ledger.get_balance(owner, symbol))

    def num_redeemable(self) -> int:
        return get_shop_state(self.ledger)['num_redeemable']

    def is_paused(self) -> bool:
        return bool(get_shop_state(self.ledger)['paused'])

    def cfo_address(self) -> str:
        return get_shop_state(self.ledger)['cfo']

    def owner_address(self) -> str:
        return get_shop_state(self.ledger)['owner']

    def redeem_logic(self) -> Optional[str]:
        """Address of the redemption collaborator, None until set."""
        return get_shop_state(self.ledger)['redeem_logic']

    def balance_of(self, wallet: str) -> int:
        """Currency held by wallet (0 for unknown addresses)."""
        require_address("wallet", wallet)
        if not self.ledger.is_registered(wallet):
            return 0
        return int(self.ledger.get_balance(wallet, self.currency_symbol))

    # ========================================================================
    # COMMANDS
    # ========================================================================

    def create(
        self,
        redeemable_id: int,
        base_price: int,
        increment: int,
        max_buy_date: int,
        redeem_date: int,
        caller: str,
    ) -> Transaction:
        pending = compute_create_redeemable(
            self.ledger, redeemable_id, base_price, increment,
            max_buy_date, redeem_date, caller,
        )
        return self._submit(pending)

    def set_base_price(self, redeemable_id: int, value: int, caller: str) -> Transaction:
        return self._submit(compute_set_base_price(self.ledger, redeemable_id, value, caller))

    def set_increment(self, redeemable_id: int, value: int, caller: str) -> Transaction:
        return self._submit(compute_set_increment(self.ledger, redeemable_id, value, caller))

    def set_max_buy_date(self, redeemable_id: int, value: int, caller: str) -> Transaction:
        return self._submit(compute_set_max_buy_date(self.ledger, redeemable_id, value, caller))

    def set_redeem_date(self, redeemable_id: int, value: int, caller: str) -> Transaction:
        return self._submit(compute_set_redeem_date(self.ledger, redeemable_id, value, caller))

    def set_cfo(self, new_cfo: str, caller: str) -> Transaction:
        return self._submit(compute_set_cfo(self.ledger, new_cfo, caller), new_cfo)

    def pause(self, caller: str) -> Transaction:
        return self._submit(compute_pause(self.ledger, caller))

    def unpause(self, caller: str) -> Transaction:
        return self._submit(compute_unpause(self.ledger, caller))

    def set_redeem_logic(self, candidate: Any, caller: str) -> Transaction:
        return self._submit(compute_set_redeem_logic(self.ledger, candidate, caller))

    def buy(self, redeemable_id: int, caller: str, paid: int) -> Transaction:
        """
        Buy one unit with paid attached. Only the current price is charged.

        Raises:
            ContractPaused, NotFound, PastMaxBuyDate, InsufficientPayment,
            InsufficientFunds
            ValueError: If caller is the system wallet or paid is out of range.
        """
        pending = compute_buy(self.ledger, redeemable_id, caller, paid)
        return self._submit(pending, caller)

    def giveaway(self, redeemable_id: int, quantity: int, receiver: str, caller: str) -> Transaction:
        """
        Give quantity units to receiver. CFO only; the price does not move.

        Raises:
            Unauthorized, InvalidQuantity, NotFound, ContractPaused
            ValueError: If receiver is the system wallet.
        """
        pending = compute_giveaway(self.ledger, redeemable_id, quantity, receiver, caller)
        return self._submit(pending, receiver)

    def deposit(self, wallet: str, amount: int) -> Transaction:
        """Fund wallet with amount of the shop currency."""
        return self._submit(compute_deposit(self.ledger, wallet, amount), wallet)

    # ========================================================================
    # CLOCK AND TEST ADMINISTRATION
    # ========================================================================

    def now(self) -> int:
        """Current ledger time as a Unix timestamp."""
        return unix_timestamp(self.ledger.current_time)

    def advance_time(self, new_time: datetime) -> None:
        self.ledger.advance_time(new_time)

    def increase_time(self, seconds: int) -> int:
        """Move the clock forward by seconds and return the new Unix time."""
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")
        self.ledger.advance_time(self.ledger.current_time + timedelta(seconds=seconds))
        return self.now()

    def snapshot(self) -> int:
        """Save the full ledger state and return its snapshot id."""
        snapshot_id = self._next_snapshot_id
        self._next_snapshot_id += 1
        self._snapshots[snapshot_id] = self.ledger.clone()
        return snapshot_id

    def revert(self, snapshot_id: int) -> None:
        """
        Restore the state saved by snapshot(snapshot_id).

        The snapshot and every later one are consumed.

        Raises:
            SnapshotNotFound: If the id is unknown or already consumed.
        """
        if snapshot_id not in self._snapshots:
            raise SnapshotNotFound(f"No snapshot {snapshot_id}")
        self.ledger = self._snapshots[snapshot_id].clone()
        for sid in [s for s in self._snapshots if s >= snapshot_id]:
            del self._snapshots[sid]

    def __repr__(self) -> str:
        return (
            f"RedeemableShop({self.config.name!r}, owner={self.owner_address()!r}, "
            f"cfo={self.cfo_address()!r}, redeemables={self.num_redeemable()}, "
            f"paused={self.is_paused()})"
        )
