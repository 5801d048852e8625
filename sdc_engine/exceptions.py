"""
Custom Exceptions for the SDC Engine

Provides a unified exception hierarchy for parameter validation,
table validation and column resolution.
"""

from typing import Optional, Dict, Any, List

from .constants import ErrorCodes


class EngineError(Exception):
    """
    Base exception for all engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCodes.ENGINE_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        result: Dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# PARAMETER ERRORS
# =============================================================================

class InvalidParameterError(EngineError):
    """Raised when a technique parameter is out of range"""

    def __init__(
        self,
        parameter: str,
        value: Any = None,
        reason: Optional[str] = None
    ):
        details: Dict[str, Any] = {"parameter": parameter}
        if value is not None:
            details["value"] = value if isinstance(value, (int, float, str, bool)) else repr(value)
        if reason:
            details["reason"] = reason
        message = f"Invalid parameter: {parameter}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, ErrorCodes.INVALID_PARAMETER, details)
        self.parameter = parameter


# =============================================================================
# TABLE ERRORS
# =============================================================================

class InvalidTableError(EngineError):
    """Raised when the input is not a sequence of records"""

    def __init__(
        self,
        message: str = "Table must be a sequence of mappings",
        row: Optional[int] = None
    ):
        details: Dict[str, Any] = {}
        if row is not None:
            details["row"] = row
        super().__init__(message, ErrorCodes.INVALID_TABLE, details)


class TableTooLargeError(EngineError):
    """Raised when a table exceeds the configured row limit"""

    def __init__(self, row_count: int, max_rows: int):
        super().__init__(
            message=f"Table has {row_count} rows, limit is {max_rows}",
            error_code=ErrorCodes.TABLE_TOO_LARGE,
            details={"row_count": row_count, "max_rows": max_rows}
        )


class MissingColumnError(EngineError):
    """Raised in strict mode when requested columns exist in no record"""

    def __init__(self, columns: List[str]):
        super().__init__(
            message=f"Columns not found in any record: {', '.join(columns)}",
            error_code=ErrorCodes.MISSING_COLUMN,
            details={"columns": columns}
        )
        self.columns = columns
