"""
Tests for input validation
"""

import pytest

from sdc_engine.config import EngineConfig
from sdc_engine.exceptions import (
    InvalidParameterError,
    InvalidTableError,
    TableTooLargeError,
)
from sdc_engine.utils.validators import (
    is_numeric,
    round_half_up,
    safe_ratio,
    validate_column_names,
    validate_epsilon,
    validate_table,
)


class TestTableValidation:

    @pytest.mark.parametrize("table", [None, "abc", b"abc", {"age": 1}, 42])
    def test_rejects_non_sequences(self, table):
        with pytest.raises(InvalidTableError):
            validate_table(table, EngineConfig())

    def test_rejects_non_mapping_rows(self):
        with pytest.raises(InvalidTableError) as exc_info:
            validate_table([{"age": 1}, ["age", 2]], EngineConfig())

        assert exc_info.value.to_dict()["details"] == {"row": 1}

    def test_rejects_oversized_table(self):
        config = EngineConfig(max_rows=2)

        with pytest.raises(TableTooLargeError) as exc_info:
            validate_table([{}, {}, {}], config)

        error = exc_info.value.to_dict()
        assert error["error"] == "TABLE_TOO_LARGE"
        assert error["details"] == {"row_count": 3, "max_rows": 2}

    def test_accepts_tuple_of_records(self):
        assert validate_table(({"a": 1},), EngineConfig()) == [{"a": 1}]


class TestParameterValidation:

    def test_column_names(self):
        assert validate_column_names(("age", "state")) == ["age", "state"]
        assert validate_column_names(None) == []

    @pytest.mark.parametrize("columns", ["age", ["age", ""], [1]])
    def test_invalid_column_names(self, columns):
        with pytest.raises(InvalidParameterError):
            validate_column_names(columns)

    def test_required_column_names(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            validate_column_names([], required=True)

        assert exc_info.value.parameter == "quasi_identifiers"

    def test_epsilon_accepts_infinity(self):
        assert validate_epsilon(float("inf")) == float("inf")

    def test_error_payload(self):
        error = InvalidParameterError("k", 0, "must be at least 1")

        assert error.to_dict() == {
            "error": "INVALID_PARAMETER",
            "message": "Invalid parameter: k (must be at least 1)",
            "details": {"parameter": "k", "value": 0, "reason": "must be at least 1"},
        }


class TestValueHelpers:

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_is_numeric(self):
        assert is_numeric(3)
        assert is_numeric(2.5)
        assert not is_numeric(True)
        assert not is_numeric("3")
        assert not is_numeric(None)

    def test_safe_ratio(self):
        assert safe_ratio(3, 0) == 0.0
        assert safe_ratio(1, 4) == 0.25
