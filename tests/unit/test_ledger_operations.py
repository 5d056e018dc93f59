"""
test_ledger_operations.py - Unit tests for Ledger class operations

Tests:
- Ledger creation and configuration
- Wallet and unit registration
- Balance operations
- Time management
- Transaction execution, rejection and idempotency
- Cloning
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from redeemable_shop import (
    Ledger, Move, ExecuteResult, UnitStateChange,
    build_transaction, currency, create_redeemable_unit,
    LedgerError, WalletNotRegistered, UnitNotRegistered,
    SYSTEM_WALLET,
)
from tests.shop_helpers import START_TIME, OWNER, CFO, BUYER


def _deposit(ledger, wallet, amount, contract_id="deposit"):
    return build_transaction(ledger, [
        Move(Decimal(amount), "ETH", SYSTEM_WALLET, wallet, contract_id)
    ])


class TestLedgerCreation:

    def test_create_ledger_minimal(self):
        ledger = Ledger("test", verbose=False)
        assert ledger.name == "test"
        assert ledger.current_time == datetime(1970, 1, 1)

    def test_create_ledger_with_options(self):
        ledger = Ledger(name="test", initial_time=START_TIME, verbose=False)
        assert ledger.current_time == START_TIME
        assert ledger.verbose is False

    def test_system_wallet_always_registered(self, empty_ledger):
        assert empty_ledger.is_registered(SYSTEM_WALLET)


class TestRegistration:

    def test_register_wallet(self, empty_ledger):
        assert empty_ledger.register_wallet("alice") == "alice"
        assert "alice" in empty_ledger.list_wallets()

    def test_register_duplicate_wallet(self, empty_ledger):
        empty_ledger.register_wallet("alice")
        with pytest.raises(ValueError, match="already registered"):
            empty_ledger.register_wallet("alice")

    def test_register_empty_wallet(self, empty_ledger):
        with pytest.raises(ValueError):
            empty_ledger.register_wallet("")

    def test_unregister_unused_wallet(self, empty_ledger):
        empty_ledger.register_wallet("alice")
        empty_ledger.unregister_wallet("alice")
        assert not empty_ledger.is_registered("alice")
        empty_ledger.register_wallet("alice")

    def test_unregister_funded_wallet(self, funded_ledger):
        with pytest.raises(ValueError, match="balance"):
            funded_ledger.unregister_wallet(BUYER)
        assert funded_ledger.is_registered(BUYER)

    def test_unregister_system_wallet(self, empty_ledger):
        with pytest.raises(ValueError):
            empty_ledger.unregister_wallet(SYSTEM_WALLET)

    def test_unregister_unknown_wallet(self, empty_ledger):
        with pytest.raises(WalletNotRegistered):
            empty_ledger.unregister_wallet("ghost")

    def test_register_duplicate_unit(self, empty_ledger):
        empty_ledger.register_unit(currency("ETH", "Ether"))
        with pytest.raises(ValueError, match="already registered"):
            empty_ledger.register_unit(currency("ETH", "Ether"))

    def test_list_units_sorted(self, basic_ledger):
        assert basic_ledger.list_units() == ["ETH", "SHOP"]

    def test_verbose_registration_prints(self, capsys):
        ledger = Ledger("loud", START_TIME, verbose=True)
        ledger.register_unit(currency("ETH", "Ether"))
        assert "Registered: ETH (Ether) [CURRENCY]" in capsys.readouterr().out


class TestBalances:

    def test_unknown_wallet(self, basic_ledger):
        with pytest.raises(WalletNotRegistered):
            basic_ledger.get_balance("nobody", "ETH")

    def test_unknown_unit(self, basic_ledger):
        with pytest.raises(UnitNotRegistered):
            basic_ledger.get_balance(BUYER, "BTC")

    def test_set_balance_in_test_mode(self, funded_ledger):
        assert funded_ledger.get_balance(BUYER, "ETH") == Decimal(10 ** 19)
        assert funded_ledger.get_positions("ETH") == {BUYER: Decimal(10 ** 19)}

    def test_set_balance_disabled_outside_test_mode(self):
        ledger = Ledger("prod", START_TIME, verbose=False)
        ledger.register_unit(currency("ETH", "Ether"))
        ledger.register_wallet("alice")
        with pytest.raises(LedgerError, match="test_mode"):
            ledger.set_balance("alice", "ETH", Decimal(1))

    def test_get_unit_state_is_a_copy(self, basic_ledger):
        state = basic_ledger.get_unit_state("SHOP")
        state['paused'] = True
        assert basic_ledger.get_unit_state("SHOP")['paused'] is False


class TestTime:

    def test_advance_time(self, empty_ledger):
        later = START_TIME + timedelta(days=1)
        empty_ledger.advance_time(later)
        assert empty_ledger.current_time == later

    def test_time_cannot_go_backwards(self, empty_ledger):
        with pytest.raises(ValueError, match="backwards"):
            empty_ledger.advance_time(START_TIME - timedelta(seconds=1))


class TestExecute:

    def test_deposit_applied(self, basic_ledger):
        result = basic_ledger.execute(_deposit(basic_ledger, BUYER, 500))
        assert result == ExecuteResult.APPLIED
        assert basic_ledger.get_balance(BUYER, "ETH") == Decimal(500)
        assert basic_ledger.get_balance(SYSTEM_WALLET, "ETH") == Decimal(-500)
        assert len(basic_ledger.transaction_log) == 1

    def test_same_intent_applied_once(self, basic_ledger):
        pending = _deposit(basic_ledger, BUYER, 500)
        assert basic_ledger.execute(pending) == ExecuteResult.APPLIED
        assert basic_ledger.execute(pending) == ExecuteResult.ALREADY_APPLIED
        assert basic_ledger.get_balance(BUYER, "ETH") == Decimal(500)

    def test_empty_pending_is_noop(self, basic_ledger):
        pending = build_transaction(basic_ledger, [])
        assert basic_ledger.execute(pending) == ExecuteResult.APPLIED
        assert basic_ledger.transaction_log == []

    def test_overdraft_rejected(self, funded_ledger):
        pending = build_transaction(funded_ledger, [
            Move(Decimal(10 ** 20), "ETH", BUYER, CFO, "overdraft")
        ])
        assert funded_ledger.execute(pending) == ExecuteResult.REJECTED
        assert "min" in funded_ledger.last_rejection
        assert funded_ledger.get_balance(BUYER, "ETH") == Decimal(10 ** 19)

    def test_unregistered_wallet_rejected(self, basic_ledger):
        result = basic_ledger.execute(_deposit(basic_ledger, "stranger", 1))
        assert result == ExecuteResult.REJECTED
        assert "wallet not registered" in basic_ledger.last_rejection

    def test_future_timestamp_rejected(self, basic_ledger):
        pending = _deposit(basic_ledger, BUYER, 1)
        rewound = Ledger("other", START_TIME - timedelta(days=1), verbose=False)
        rewound.register_unit(currency("ETH", "Ether"))
        rewound.register_wallet(BUYER)
        assert rewound.execute(pending) == ExecuteResult.REJECTED
        assert rewound.last_rejection == "future timestamp"

    def test_stale_state_change_rejected(self, basic_ledger):
        old = basic_ledger.get_unit_state("SHOP")
        first = build_transaction(basic_ledger, [], [
            UnitStateChange("SHOP", old, {**old, 'paused': True, 'nonce': 1})
        ])
        second = build_transaction(basic_ledger, [], [
            UnitStateChange("SHOP", old, {**old, 'cfo': BUYER, 'nonce': 1})
        ])
        assert basic_ledger.execute(first) == ExecuteResult.APPLIED
        assert basic_ledger.execute(second) == ExecuteResult.REJECTED
        assert "stale state" in basic_ledger.last_rejection
        assert basic_ledger.get_unit_state("SHOP")['cfo'] == CFO

    def test_units_to_create_registered(self, basic_ledger):
        unit = create_redeemable_unit(0, 10, 1, 2 ** 40, 2 ** 40)
        pending = build_transaction(basic_ledger, [
            Move(Decimal(1), unit.symbol, SYSTEM_WALLET, BUYER, "issue")
        ], units_to_create=(unit,))
        assert basic_ledger.execute(pending) == ExecuteResult.APPLIED
        assert basic_ledger.get_balance(BUYER, "REDEEMABLE_0") == Decimal(1)

    def test_units_to_create_rolled_back_on_rejection(self, basic_ledger):
        unit = create_redeemable_unit(0, 10, 1, 2 ** 40, 2 ** 40)
        pending = build_transaction(basic_ledger, [
            Move(Decimal(1), unit.symbol, SYSTEM_WALLET, "stranger", "issue")
        ], units_to_create=(unit,))
        assert basic_ledger.execute(pending) == ExecuteResult.REJECTED
        assert "REDEEMABLE_0" not in basic_ledger.list_units()

    def test_verbose_rejection_prints(self, capsys):
        ledger = Ledger("loud", START_TIME, verbose=True)
        ledger.register_unit(currency("ETH", "Ether"))
        ledger.execute(_deposit(ledger, "stranger", 1))
        assert "✗ REJECTED" in capsys.readouterr().out

    def test_transaction_receipt(self, basic_ledger):
        basic_ledger.execute(_deposit(basic_ledger, BUYER, 7, "deposit_buyer"))
        tx = basic_ledger.transaction_log[-1]
        assert tx.sequence_number == 0
        assert tx.ledger_name == "test"
        assert tx.contract_ids == frozenset({"deposit_buyer"})
        assert "Transaction:" in repr(tx)


class TestConservation:

    def test_total_supply_zero_after_issuance(self, basic_ledger):
        basic_ledger.execute(_deposit(basic_ledger, BUYER, 500))
        assert basic_ledger.total_supply("ETH") == Decimal(0)
        assert basic_ledger.verify_double_entry()['valid']

    def test_verify_with_expected_supplies(self, funded_ledger):
        # set_balance bypasses double entry
        report = funded_ledger.verify_double_entry()
        assert not report['valid']
        assert report['discrepancies'][0]['unit'] == "ETH"
        report = funded_ledger.verify_double_entry({"ETH": Decimal(10 ** 19)})
        assert report['valid']

    def test_verify_unknown_expected_unit(self, basic_ledger):
        report = basic_ledger.verify_double_entry({"BTC": Decimal(1)})
        assert not report['valid']
        assert report['discrepancies'][0]['error'] == 'unit not registered'


class TestClone:

    def test_clone_is_independent(self, basic_ledger):
        basic_ledger.execute(_deposit(basic_ledger, BUYER, 500))
        cloned = basic_ledger.clone()
        basic_ledger.execute(_deposit(basic_ledger, OWNER, 1))
        cloned.execute(_deposit(cloned, BUYER, 2, "second"))

        assert basic_ledger.get_balance(BUYER, "ETH") == Decimal(500)
        assert cloned.get_balance(BUYER, "ETH") == Decimal(502)
        assert cloned.get_balance(OWNER, "ETH") == Decimal(0)
        assert len(cloned.transaction_log) == 2
        assert len(basic_ledger.transaction_log) == 2

    def test_clone_keeps_seen_intents(self, basic_ledger):
        pending = _deposit(basic_ledger, BUYER, 500)
        basic_ledger.execute(pending)
        assert basic_ledger.clone().execute(pending) == ExecuteResult.ALREADY_APPLIED
