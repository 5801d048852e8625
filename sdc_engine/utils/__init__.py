"""
Utility functions for the SDC engine
Input validation and numeric helpers
"""

from .validators import (
    is_numeric,
    round_half_up,
    safe_ratio,
    validate_table,
    validate_column_names,
    validate_column_name,
    validate_positive_int,
    validate_fraction,
    validate_epsilon,
    validate_non_negative,
)

__all__ = [
    # Helpers
    "is_numeric",
    "round_half_up",
    "safe_ratio",
    # Validators
    "validate_table",
    "validate_column_names",
    "validate_column_name",
    "validate_positive_int",
    "validate_fraction",
    "validate_epsilon",
    "validate_non_negative",
]
