"""
Core math modules для cubic_issuance

Целочисленные математические примитивы кривой выпуска с гарантией
детерминизма и явной проверкой переполнения.
"""

# UInt256 envelope
from cubic_issuance.core.math.uint256 import (
    UINT256_BITS,
    UINT256_MAX,
    checked_add,
    checked_mul,
    checked_pow,
    checked_sub,
    require_in_range,
    saturating_pow,
    validate_uint256,
)

# Integer roots
from cubic_issuance.core.math.integer_roots import integer_nth_root

# Bonding curve
from cubic_issuance.core.math.bonding_curve import (
    CURVE_DENOMINATOR,
    CURVE_EXPONENT,
    SCALE,
    curve_price,
    inverse_curve,
    pool_value,
)

__all__ = [
    # UInt256: constants
    "UINT256_BITS",
    "UINT256_MAX",
    # UInt256: checked arithmetic
    "checked_add",
    "checked_mul",
    "checked_pow",
    "checked_sub",
    "require_in_range",
    "saturating_pow",
    "validate_uint256",
    # Integer roots
    "integer_nth_root",
    # Bonding curve: constants
    "CURVE_DENOMINATOR",
    "CURVE_EXPONENT",
    "SCALE",
    # Bonding curve: functions
    "curve_price",
    "inverse_curve",
    "pool_value",
]
