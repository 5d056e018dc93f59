"""
conftest.py - Shared pytest fixtures for redeemable shop tests

Provides common fixtures used across unit, conformance and functional tests:
- Basic ledgers (empty, with currency and shop control unit)
- Shops (empty catalog, one redeemable, funded buyers)
"""

import pytest
from decimal import Decimal

from redeemable_shop import (
    Ledger, RedeemableShop, ShopConfig,
    currency, create_shop_unit,
    to_wei,
)
from tests.shop_helpers import (
    START_TIME, OWNER, CFO, BUYER,
    create_default_redeemable,
)


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def empty_ledger():
    """Fresh ledger with no registrations."""
    return Ledger("test", START_TIME, verbose=False, test_mode=True)


@pytest.fixture
def basic_ledger():
    """Ledger with ETH, the shop control unit and three wallets."""
    ledger = Ledger("test", START_TIME, verbose=False, test_mode=True)
    ledger.register_unit(currency("ETH", "Ether"))
    ledger.register_unit(create_shop_unit(OWNER, "ETH", CFO))
    ledger.register_wallet(OWNER)
    ledger.register_wallet(CFO)
    ledger.register_wallet(BUYER)
    return ledger


@pytest.fixture
def funded_ledger(basic_ledger):
    """Basic ledger with the buyer holding 10 ether."""
    basic_ledger.set_balance(BUYER, "ETH", Decimal(to_wei(10)))
    return basic_ledger


# =============================================================================
# SHOP FIXTURES
# =============================================================================

@pytest.fixture
def config():
    return ShopConfig(name="test_shop", initial_time=START_TIME, verbose=False)


@pytest.fixture
def empty_shop(config):
    """Shop with no redeemables; OWNER is CLevel and also CFO."""
    return RedeemableShop(OWNER, config)


@pytest.fixture
def shop(config):
    """Shop with CFO assigned and redeemable 0 on the default price curve."""
    s = RedeemableShop(OWNER, config)
    s.set_cfo(CFO, caller=OWNER)
    create_default_redeemable(s, 0)
    return s


@pytest.fixture
def funded_shop(shop):
    """Shop whose buyer holds 100 ether."""
    shop.deposit(BUYER, to_wei(100))
    return shop


@pytest.fixture
def multi_species_shop(config):
    """Shop with ten redeemables and five buyers holding 100 ether each."""
    s = RedeemableShop(OWNER, config)
    s.set_cfo(CFO, caller=OWNER)
    for i in range(10):
        create_default_redeemable(s, i)
    for b in range(5):
        s.deposit(f"0xbuyer{b}", to_wei(100))
    return s
