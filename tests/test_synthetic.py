"""
Tests for synthetic table generation
"""

import pytest

from sdc_engine.config import EngineConfig
from sdc_engine.exceptions import InvalidParameterError, InvalidTableError, TableTooLargeError
from sdc_engine.privacy.synthetic import SyntheticSampler, generate_synthetic_data, table_columns


SOURCE = [{"age": 20 + i, "state": "MH" if i % 2 else "KA", "id": i} for i in range(10)]


class TestSyntheticSampler:
    """Test bootstrap-with-jitter sampling"""

    def setup_method(self):
        self.config = EngineConfig()

    def test_target_count(self):
        result = SyntheticSampler(seed=1, config=self.config).generate(SOURCE, 50)

        assert len(result.processed_table) == 5
        assert result.target_count == 5

    def test_target_count_floors(self):
        result = SyntheticSampler(seed=1, config=self.config).generate(SOURCE, 33)

        assert len(result.processed_table) == 3

    def test_oversampling_allowed(self):
        result = SyntheticSampler(seed=1, config=self.config).generate(SOURCE, 250)

        assert len(result.processed_table) == 25

    def test_numeric_jitter_bounds(self):
        data = [{"age": 100, "state": "MH"}] * 5

        result = SyntheticSampler(seed=2, config=self.config).generate(data, 400)

        for row in result.processed_table:
            assert 90.0 <= row["age"] <= 110.0
            assert row["state"] == "MH"

    def test_zero_jitter_copies_rows(self):
        config = EngineConfig(synthetic_jitter=0.0)

        result = SyntheticSampler(seed=4, config=config).generate(SOURCE, 100)

        for row in result.processed_table:
            assert SOURCE[int(row["id"])]["age"] == row["age"]

    def test_seeded_runs_are_deterministic(self):
        first = SyntheticSampler(seed=8, config=self.config).generate(SOURCE)
        second = SyntheticSampler(seed=8, config=self.config).generate(SOURCE)

        assert first.processed_table == second.processed_table

    def test_column_subset(self):
        result = SyntheticSampler(seed=1, config=self.config).generate(SOURCE, 100, ["state"])

        assert all(set(row) == {"state"} for row in result.processed_table)
        assert result.columns == ["state"]

    def test_absent_columns_not_added(self):
        data = [{"age": 30}, {"age": 40}]

        result = SyntheticSampler(seed=1, config=self.config).generate(data, 100, ["age", "zip"])

        assert all(set(row) == {"age"} for row in result.processed_table)

    def test_empty_table(self):
        result = SyntheticSampler(seed=1, config=self.config).generate([], 100)

        assert result.processed_table == []
        assert result.target_count == 0

    def test_placeholder_information_loss(self):
        result = SyntheticSampler(seed=1, config=self.config).generate(SOURCE)

        assert result.information_loss == pytest.approx(0.2)
        assert result.information_loss_is_estimate is True
        assert result.technique == "synthetic-data"

    def test_negative_percent_rejected(self):
        with pytest.raises(InvalidParameterError):
            SyntheticSampler(seed=1).generate(SOURCE, -5)

    def test_output_above_row_limit_rejected(self):
        config = EngineConfig(max_rows=10)

        with pytest.raises(TableTooLargeError) as exc_info:
            SyntheticSampler(seed=1, config=config).generate([{"a": 1}] * 10, 1000)

        assert exc_info.value.details == {"row_count": 100, "max_rows": 10}

    def test_output_at_row_limit_allowed(self):
        config = EngineConfig(max_rows=10)

        result = SyntheticSampler(seed=1, config=config).generate([{"a": 1}] * 5, 200)

        assert len(result.processed_table) == 10

    def test_integer_outside_float_range_rejected(self):
        with pytest.raises(InvalidTableError) as exc_info:
            SyntheticSampler(seed=1, config=self.config).generate([{"a": 10 ** 400}])

        assert exc_info.value.details == {"row": 0}


def test_table_columns_first_seen_order():
    assert table_columns([{"b": 1}, {"a": 2, "b": 3}, {"c": 4}]) == ["b", "a", "c"]


def test_convenience_function():
    result = generate_synthetic_data(SOURCE, 20, seed=3)

    assert len(result.processed_table) == 2
