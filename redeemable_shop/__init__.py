"""
redeemable_shop - Redeemable Catalog and Linear-Pricing Ledger

A catalog of sequentially numbered redeemables whose price grows linearly
with every unit sold, settled on an atomic double-entry ledger.

Usage:
    from redeemable_shop import RedeemableShop, to_wei

    shop = RedeemableShop(owner="ceo")
    shop.set_cfo("cfo", caller="ceo")
    shop.create(0, to_wei("0.043"), to_wei("0.0017"),
                max_buy_date=32522601600, redeem_date=32546188800, caller="ceo")

    shop.deposit("alice", to_wei(1))
    shop.buy(0, caller="alice", paid=shop.current_price(0))
    shop.giveaway(0, 2, receiver="bob", caller="cfo")
"""

# Core types
from .core import (
    LedgerView,
    Move,
    Transaction,
    PendingTransaction,
    TransactionOrigin,
    OriginType,
    build_transaction,
    Unit,
    UnitStateChange,
    ExecuteResult,
    LedgerError,
    InsufficientFunds,
    BalanceConstraintViolation,
    TransferRuleViolation,
    UnitNotRegistered,
    WalletNotRegistered,
    TransactionRejected,
    ShopError,
    Unauthorized,
    NotFound,
    DuplicateOrNonSequentialId,
    ContractPaused,
    ContractNotPaused,
    PastMaxBuyDate,
    InsufficientPayment,
    InvalidQuantity,
    InvalidRedeemLogic,
    SnapshotNotFound,
    issuance_only_transfer_rule,
    currency,
    unix_timestamp,
    SYSTEM_WALLET,
    MAX_AMOUNT,
    UNIT_TYPE_CURRENCY,
    UNIT_TYPE_REDEEMABLE,
    UNIT_TYPE_SHOP_CONTROL,
)

# Ledger
from .ledger import Ledger

# Access control
from .access import (
    SHOP_SYMBOL,
    RedeemLogic,
    create_shop_unit,
    get_shop_state,
    is_clevel,
    is_cfo,
    is_paused,
    require_clevel,
    require_cfo,
    require_not_paused,
    require_address,
    compute_pause,
    compute_unpause,
    compute_set_cfo,
    compute_set_redeem_logic,
)

# Redeemables and currency
from .units.redeemable import (
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
from .units.currency import compute_deposit

# Configuration
from .config import (
    ShopConfig,
    to_wei,
    WEI_PER_ETHER,
    DENOMINATIONS,
    DEFAULT_BASE_PRICE,
    DEFAULT_INCREMENT,
    VERY_FAR_DATE,
    VERY_FAR_DATE_PLUS_ONE_YEAR,
)

# Facade
from .shop import RedeemableShop

__all__ = [
    # Core
    'LedgerView', 'Move', 'Transaction', 'PendingTransaction', 'TransactionOrigin', 'OriginType',
    'build_transaction',
    'Unit', 'UnitStateChange', 'ExecuteResult',
    'LedgerError', 'InsufficientFunds', 'BalanceConstraintViolation',
    'TransferRuleViolation', 'UnitNotRegistered', 'WalletNotRegistered', 'TransactionRejected',
    'ShopError', 'Unauthorized', 'NotFound', 'DuplicateOrNonSequentialId',
    'ContractPaused', 'ContractNotPaused', 'PastMaxBuyDate', 'InsufficientPayment',
    'InvalidQuantity', 'InvalidRedeemLogic', 'SnapshotNotFound',
    'issuance_only_transfer_rule', 'currency', 'unix_timestamp',
    'SYSTEM_WALLET', 'MAX_AMOUNT', 'UNIT_TYPE_CURRENCY', 'UNIT_TYPE_REDEEMABLE', 'UNIT_TYPE_SHOP_CONTROL',
    # Ledger
    'Ledger',
    # Access control
    'SHOP_SYMBOL', 'RedeemLogic', 'create_shop_unit', 'get_shop_state',
    'is_clevel', 'is_cfo', 'is_paused',
    'require_clevel', 'require_cfo', 'require_not_paused', 'require_address',
    'compute_pause', 'compute_unpause', 'compute_set_cfo', 'compute_set_redeem_logic',
    # Redeemables
    'Redeemable', 'REDEEMABLE_PREFIX', 'redeemable_symbol', 'create_redeemable_unit',
    'num_redeemable', 'get_redeemable', 'compute_create_redeemable',
    'compute_price', 'current_price', 'cost_of_purchases', 'price_schedule',
    'compute_set_base_price', 'compute_set_increment',
    'compute_set_max_buy_date', 'compute_set_redeem_date',
    'compute_buy', 'compute_giveaway', 'compute_deposit',
    # Configuration
    'ShopConfig', 'to_wei', 'WEI_PER_ETHER', 'DENOMINATIONS',
    'DEFAULT_BASE_PRICE', 'DEFAULT_INCREMENT',
    'VERY_FAR_DATE', 'VERY_FAR_DATE_PLUS_ONE_YEAR',
    # Facade
    'RedeemableShop',
]

__version__ = '1.0.0'
