"""
Tests for t-closeness enforcement
"""

import pytest

from sdc_engine.config import EngineConfig
from sdc_engine.exceptions import InvalidParameterError
from sdc_engine.privacy.equivalence import EquivalenceClassIndex
from sdc_engine.privacy.t_closeness import (
    TClosenessEnforcer,
    enforce_t_closeness,
    total_variation_distance,
    value_distribution,
)


SKEWED_TABLE = [
    {"zip": "A", "disease": "flu"},
    {"zip": "A", "disease": "flu"},
    {"zip": "B", "disease": "cold"},
    {"zip": "B", "disease": "cold"},
    {"zip": "C", "disease": "flu"},
    {"zip": "C", "disease": "cold"},
]


class TestDistances:

    def test_disjoint_distributions(self):
        assert total_variation_distance({"a": 1.0}, {"b": 1.0}) == 1.0

    def test_partial_overlap(self):
        assert total_variation_distance({"a": 0.5, "b": 0.5}, {"a": 1.0}) == 0.5

    def test_identical_distributions(self):
        dist = {"a": 0.25, "b": 0.75}
        assert total_variation_distance(dist, dict(dist)) == 0.0

    def test_value_distribution(self):
        assert value_distribution(SKEWED_TABLE, "disease") == {"flu": 0.5, "cold": 0.5}
        assert value_distribution([], "disease") == {}


class TestTClosenessEnforcer:
    """Test suppression of classes far from the global distribution"""

    def setup_method(self):
        self.config = EngineConfig()

    def test_skewed_classes_suppressed(self):
        result = TClosenessEnforcer(0.3, self.config).anonymize(SKEWED_TABLE, ["zip"], "disease")

        assert result.processed_table == SKEWED_TABLE[4:]
        assert result.records_suppressed == 4
        assert result.satisfying_classes == 1
        assert result.violating_classes == 2
        assert result.avg_distance == pytest.approx(1 / 3)
        assert result.max_distance == pytest.approx(0.5)
        assert result.information_loss == pytest.approx(4 / 6)
        assert result.global_distribution == {"flu": 0.5, "cold": 0.5}

    def test_class_matching_global_distribution_always_kept(self):
        data = [
            {"zip": "A", "disease": "flu"},
            {"zip": "A", "disease": "cold"},
            {"zip": "B", "disease": "flu"},
            {"zip": "B", "disease": "cold"},
        ]

        result = TClosenessEnforcer(0.0, self.config).anonymize(data, ["zip"], "disease")

        assert result.records_suppressed == 0
        assert result.max_distance == 0.0

    def test_retained_classes_within_threshold(self):
        t = 0.3
        result = TClosenessEnforcer(t, self.config).anonymize(SKEWED_TABLE, ["zip"], "disease")

        global_dist = value_distribution(SKEWED_TABLE, "disease")
        for ec in EquivalenceClassIndex(result.processed_table, ["zip"]):
            distance = total_variation_distance(global_dist, value_distribution(ec.records, "disease"))
            assert distance <= t + 1e-9

    def test_threshold_one_keeps_everything(self):
        result = TClosenessEnforcer(1.0, self.config).anonymize(SKEWED_TABLE, ["zip"], "disease")

        assert result.records_suppressed == 0

    def test_empty_table(self):
        result = TClosenessEnforcer(0.2, self.config).anonymize([], ["zip"], "disease")

        assert result.processed_table == []
        assert result.avg_distance == 0.0
        assert result.max_distance == 0.0

    @pytest.mark.parametrize("t", [-0.1, 1.5, "0.2"])
    def test_invalid_t(self, t):
        with pytest.raises(InvalidParameterError):
            TClosenessEnforcer(t)

    def test_convenience_function(self):
        result = enforce_t_closeness(SKEWED_TABLE, ["zip"], "disease", t=0.5)

        assert result.records_suppressed == 0
