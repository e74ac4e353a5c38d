"""
Math modules для numerics

Численные примитивы с защитой от overflow/NaN и каноническое форматирование.
"""

# Numerical Safeguards
from src.numerics.math.numerical_safeguards import (
    # Epsilon constants
    EPS_FLOAT32_COMPARE_ABS,
    EPS_FLOAT32_COMPARE_REL,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    # Overflow-safe functions
    safe_cos,
    safe_cosh,
    safe_exp,
    safe_pow,
    safe_product,
    safe_sin,
    safe_sinh,
    # Epsilon comparisons
    is_close,
    is_valid_float,
    is_zero,
    # Utilities
    round_half_up,
)

# Formatting
from src.numerics.math.formatting import (
    FORMAT_DECIMALS,
    format_component,
    format_terms,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_FLOAT32_COMPARE_ABS",
    "EPS_FLOAT32_COMPARE_REL",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    # Numerical Safeguards — Overflow-safe functions
    "safe_cos",
    "safe_cosh",
    "safe_exp",
    "safe_pow",
    "safe_product",
    "safe_sin",
    "safe_sinh",
    # Numerical Safeguards — Epsilon comparisons
    "is_close",
    "is_valid_float",
    "is_zero",
    # Numerical Safeguards — Utilities
    "round_half_up",
    # Formatting
    "FORMAT_DECIMALS",
    "format_component",
    "format_terms",
]
