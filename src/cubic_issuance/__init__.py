"""
cubic_issuance — issuance/redemption engine on a cubic bonding curve.

The issuer is always the counterparty: unit price is a deterministic function
of outstanding supply, computed with bit-exact integer math.
"""

from cubic_issuance.core.errors import (
    AmountTooHigh,
    ArithmeticOverflow,
    BelowMinimum,
    InsufficientAmount,
    InsufficientFunds,
    IssuanceError,
    ReentrantCall,
    SupplyCeilingReached,
    ZeroAmount,
)
from cubic_issuance.core.math import SCALE, curve_price, integer_nth_root, inverse_curve
from cubic_issuance.issuance import (
    BuyResult,
    InMemoryUnitLedger,
    InMemoryValueVault,
    IssuanceLedger,
    LedgerConfig,
    SellResult,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "IssuanceError",
    "ZeroAmount",
    "AmountTooHigh",
    "InsufficientFunds",
    "InsufficientAmount",
    "SupplyCeilingReached",
    "BelowMinimum",
    "ArithmeticOverflow",
    "ReentrantCall",
    # Curve math
    "SCALE",
    "curve_price",
    "inverse_curve",
    "integer_nth_root",
    # Ledger
    "IssuanceLedger",
    "LedgerConfig",
    "BuyResult",
    "SellResult",
    "InMemoryUnitLedger",
    "InMemoryValueVault",
]
