"""
Tests for k-anonymity enforcement
"""

import copy
import math
import random

import pytest

from sdc_engine.config import EngineConfig
from sdc_engine.exceptions import InvalidParameterError, MissingColumnError
from sdc_engine.privacy.equivalence import EquivalenceClassIndex
from sdc_engine.privacy.k_anonymity import (
    KAnonymizer,
    check_k_anonymity,
    enforce_k_anonymity,
    generalize_value,
)


SCENARIO_TABLE = [
    {"age": 30, "state": "MH", "income": 100},
    {"age": 30, "state": "MH", "income": 200},
    {"age": 30, "state": "MH", "income": 300},
    {"age": 40, "state": "KA", "income": 400},
    {"age": 40, "state": "KA", "income": 500},
    {"age": 40, "state": "KA", "income": 600},
]


def random_table(seed: int, size: int):
    rnd = random.Random(seed)
    return [
        {"age": rnd.choice([20, 30, 40, 50, 60, 70]),
         "state": rnd.choice(["MH", "KA", "DL"]),
         "id": i}
        for i in range(size)
    ]


class TestGeneralizeValue:
    """Test quasi-identifier generalization"""

    def test_numeric_range_labels(self):
        assert generalize_value(34) == "30-39"
        assert generalize_value(30) == "30-39"
        assert generalize_value(34.7) == "30-39"
        assert generalize_value(0) == "0-9"
        assert generalize_value(-5) == "-10--1"

    def test_custom_bucket_width(self):
        assert generalize_value(34, bucket_width=5) == "30-34"

    def test_non_numeric_masked(self):
        assert generalize_value("MH") == "*"
        assert generalize_value(None) == "*"
        assert generalize_value(True) == "*"
        assert generalize_value("MH", mask_token="#") == "#"


class TestKAnonymizer:
    """Test suppression and generalization"""

    def setup_method(self):
        self.config = EngineConfig()

    def test_already_k_anonymous(self):
        result = KAnonymizer(3, 0.1, self.config).anonymize(SCENARIO_TABLE, ["age", "state"])

        assert len(result.processed_table) == 6
        assert result.records_suppressed == 0
        assert result.information_loss == 0.0
        assert result.min_group_size == 3
        assert result.max_group_size == 3
        assert result.avg_group_size == 3.0
        assert result.equivalence_class_count == 2
        assert result.privacy_risk == 100
        assert result.technique == "k-anonymity"

    def test_all_unique_fully_suppressed(self):
        data = [{"age": a, "state": "MH"} for a in (21, 34, 47, 58)]

        result = KAnonymizer(2, 1.0, self.config).anonymize(data, ["age", "state"])

        assert result.records_suppressed == 4
        assert result.information_loss == 1.0
        assert result.processed_table == []
        assert result.min_group_size == 0
        assert result.privacy_risk == 0

    def test_generalizes_once_budget_exhausted(self):
        data = SCENARIO_TABLE[:3] + [
            {"age": 34, "state": "GA", "income": 1},
            {"age": 57, "state": "KA", "income": 2},
        ]
        data.insert(3, {"age": 30, "state": "MH", "income": 0})

        # budget = floor(6 * 0.2) = 1
        result = KAnonymizer(2, 0.2, self.config).anonymize(data, ["age", "state"])

        assert result.records_suppressed == 1
        assert result.records_generalized == 1
        assert result.information_loss == pytest.approx(1 / 6)
        assert result.processed_table[-1] == {"age": "50-59", "state": "*", "income": 2}
        assert result.equivalence_class_count == 2
        assert result.min_group_size == 1
        assert result.max_group_size == 4
        assert result.privacy_risk == 50

    def test_zero_budget_generalizes_everything(self):
        data = [{"age": 21, "state": "MH"}, {"age": 34, "state": "KA"}]

        result = KAnonymizer(2, 0.0, self.config).anonymize(data, ["age", "state"])

        assert result.records_suppressed == 0
        assert result.processed_table == [
            {"age": "20-29", "state": "*"},
            {"age": "30-39", "state": "*"},
        ]

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    @pytest.mark.parametrize("k,limit", [(2, 0.1), (3, 0.5), (5, 0.05)])
    def test_invariants_on_random_tables(self, seed, k, limit):
        data = random_table(seed, 60)

        result = KAnonymizer(k, limit, self.config).anonymize(data, ["age", "state"])

        assert result.records_suppressed <= math.floor(len(data) * limit)
        assert result.records_suppressed + len(result.processed_table) == len(data)

        verbatim = [r for r in result.processed_table if isinstance(r["age"], int)]
        for ec in EquivalenceClassIndex(verbatim, ["age", "state"]):
            assert ec.size >= k

    def test_column_set_preserved(self):
        data = [{"age": 21, "state": "MH", "note": "x"}, {"age": 22, "note": "y"}]

        result = KAnonymizer(2, 0.0, self.config).anonymize(data, ["age", "state"])

        assert [set(r) for r in result.processed_table] == [set(r) for r in data]

    def test_input_not_mutated(self):
        data = copy.deepcopy(SCENARIO_TABLE[:4])
        snapshot = copy.deepcopy(data)

        KAnonymizer(3, 0.0, self.config).anonymize(data, ["age", "state"])

        assert data == snapshot

    def test_empty_table(self):
        result = KAnonymizer(3, 0.5, self.config).anonymize([], ["age"])

        assert result.processed_table == []
        assert result.information_loss == 0.0
        assert result.avg_group_size == 0.0
        assert result.privacy_risk == 0

    @pytest.mark.parametrize("k", [0, -1, 2.5, True])
    def test_invalid_k(self, k):
        with pytest.raises(InvalidParameterError):
            KAnonymizer(k)

    @pytest.mark.parametrize("limit", [-0.1, 1.5, float("nan")])
    def test_invalid_suppression_limit(self, limit):
        with pytest.raises(InvalidParameterError):
            KAnonymizer(2, limit)

    def test_quasi_identifiers_required(self):
        with pytest.raises(InvalidParameterError):
            KAnonymizer(2).anonymize(SCENARIO_TABLE, [])


class TestKAnonymityCheck:
    """Test the k-anonymity analysis"""

    def test_check_reports_violations(self):
        data = SCENARIO_TABLE + [{"age": 99, "state": "GA", "income": 7}]

        analysis = KAnonymizer(3).check_k_anonymity(data, ["age", "state"])

        assert analysis["k_anonymous"] is False
        assert analysis["violation_count"] == 1
        assert analysis["violations"][0]["qi_combination"] == {"age": 99, "state": "GA"}
        assert analysis["violations"][0]["record_indices"] == [6]
        assert analysis["min_group_size"] == 1
        assert analysis["total_groups"] == 3

    def test_convenience_functions(self):
        assert check_k_anonymity(SCENARIO_TABLE, 3, ["age", "state"]) is True
        assert check_k_anonymity(SCENARIO_TABLE, 4, ["age", "state"]) is False

        result = enforce_k_anonymity(SCENARIO_TABLE, 4, ["age", "state"], suppression_limit=1.0)
        assert result.records_suppressed == 6

    def test_check_honours_strict_columns(self):
        config = EngineConfig(strict_columns=True)

        with pytest.raises(MissingColumnError):
            KAnonymizer(3, config=config).check_k_anonymity(SCENARIO_TABLE, ["age", "zip"])


class TestLargeIntegers:
    """Integers beyond the float range generalize with integer arithmetic"""

    def test_generalize_value(self):
        huge = 10 ** 400

        assert generalize_value(huge) == f"{huge}-{huge + 9}"
        assert generalize_value(-huge - 5) == f"{-huge - 10}--{huge + 1}"

    def test_anonymize_generalizes_huge_integer(self):
        huge = 10 ** 400
        data = [{"age": huge, "s": "x"}]

        result = KAnonymizer(2, 0.0, EngineConfig()).anonymize(data, ["age", "s"])

        assert result.processed_table == [{"age": f"{huge}-{huge + 9}", "s": "*"}]
