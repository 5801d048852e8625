"""
Input Validators for the SDC Engine

Provides validation utilities for tables, quasi-identifier lists and
technique parameters. All checks run before any transformation work.
"""

import math
import logging
import numbers
from typing import Optional, Any, List, Mapping, Sequence

from ..config import EngineConfig, get_engine_config
from ..exceptions import InvalidParameterError, InvalidTableError, TableTooLargeError

logger = logging.getLogger(__name__)


# =============================================================================
# VALUE HELPERS
# =============================================================================

def is_numeric(value: Any) -> bool:
    """True for real numbers; booleans count as categorical."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))


def to_float(value: Any, column: str, row: Optional[int] = None) -> float:
    """
    Convert a numeric cell to float.

    Raises:
        InvalidTableError: If an integer cell lies outside the float range
    """
    try:
        return float(value)
    except OverflowError:
        raise InvalidTableError(
            f"Value in column '{column}' is outside the float range", row=row
        ) from None


def safe_ratio(numerator: float, denominator: float) -> float:
    """Division that yields 0.0 for an empty denominator"""
    if not denominator:
        return 0.0
    return numerator / denominator


# =============================================================================
# TABLE VALIDATION
# =============================================================================

def validate_table(
    table: Any,
    config: Optional[EngineConfig] = None
) -> List[Mapping[str, Any]]:
    """
    Validate an in-memory table.

    Args:
        table: Sequence of records (mappings of column name to scalar)
        config: Engine configuration (global instance if None)

    Returns:
        The table as a list of records

    Raises:
        InvalidTableError: If the table is not a sequence of mappings
        TableTooLargeError: If the table exceeds the configured row limit
    """
    config = config or get_engine_config()

    if table is None:
        raise InvalidTableError("Table is required")

    if isinstance(table, (str, bytes, Mapping)) or not isinstance(table, Sequence):
        raise InvalidTableError()

    if len(table) > config.max_rows:
        logger.warning("Rejected oversized table: %d rows", len(table))
        raise TableTooLargeError(len(table), config.max_rows)

    for index, record in enumerate(table):
        if not isinstance(record, Mapping):
            raise InvalidTableError(f"Row {index} is not a mapping", row=index)

    return list(table)


def validate_column_names(
    columns: Any,
    field_name: str = "quasi_identifiers",
    required: bool = False
) -> List[str]:
    """
    Validate an ordered list of column names.

    Args:
        columns: Column names to validate
        field_name: Parameter name for error messages
        required: Whether at least one column must be given

    Returns:
        List of column names in the given order

    Raises:
        InvalidParameterError: If validation fails
    """
    if columns is None:
        columns = []

    if isinstance(columns, str) or not isinstance(columns, Sequence):
        raise InvalidParameterError(field_name, reason="must be a list of column names")

    for column in columns:
        if not isinstance(column, str) or not column:
            raise InvalidParameterError(field_name, column, "column names must be non-empty strings")

    if required and not columns:
        raise InvalidParameterError(field_name, reason="at least one column is required")

    return list(columns)


def validate_column_name(column: Any, field_name: str = "sensitive_attribute") -> str:
    """Validate a single column name"""
    if not isinstance(column, str) or not column.strip():
        raise InvalidParameterError(field_name, column, "must be a non-empty column name")
    return column


# =============================================================================
# PARAMETER VALIDATION
# =============================================================================

def validate_positive_int(value: Any, field_name: str) -> int:
    """
    Validate a strictly positive integer parameter (k, l).

    Raises:
        InvalidParameterError: If the value is not an integer >= 1
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(field_name, value, "must be an integer")

    if value < 1:
        raise InvalidParameterError(field_name, value, "must be at least 1")

    return int(value)


def validate_fraction(value: Any, field_name: str) -> float:
    """
    Validate a parameter constrained to the closed interval [0, 1].

    Raises:
        InvalidParameterError: If the value is not a number in [0, 1]
    """
    if not is_numeric(value) or math.isnan(value):
        raise InvalidParameterError(field_name, value, "must be a number")

    if value < 0 or value > 1:
        raise InvalidParameterError(field_name, value, "must be between 0 and 1")

    return float(value)


def validate_epsilon(value: Any, field_name: str = "epsilon") -> float:
    """
    Validate a differential privacy budget.

    Raises:
        InvalidParameterError: If epsilon is not a positive number
    """
    if not is_numeric(value) or math.isnan(value):
        raise InvalidParameterError(field_name, value, "must be a number")

    if value <= 0:
        raise InvalidParameterError(field_name, value, "must be greater than 0")

    return float(value)


def validate_non_negative(value: Any, field_name: str) -> float:
    """Validate a finite number >= 0"""
    if not is_numeric(value) or math.isnan(value) or math.isinf(value):
        raise InvalidParameterError(field_name, value, "must be a finite number")

    if value < 0:
        raise InvalidParameterError(field_name, value, "must not be negative")

    return float(value)
