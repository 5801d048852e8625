"""
Re-identification risk assessment for the SDC engine
Prosecutor, journalist and marketer attacker models over equivalence classes
"""

from typing import List, Dict, Any, Optional, Sequence, Mapping, Tuple

import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import AttackScenarios, RiskThresholds, RiskLevels
from ..exceptions import InvalidParameterError
from ..models import RiskMetrics, EquivalenceClassRisk
from ..utils.validators import (
    round_half_up,
    safe_ratio,
    validate_table,
    validate_column_names,
    validate_positive_int,
)
from .equivalence import EquivalenceClassIndex, check_columns

logger = structlog.get_logger(__name__)


def pitman_population_estimate(sample_uniques: int, sample_size: int,
                               population_size: int) -> int:
    """
    Estimate the number of population uniques from sample uniques.

    The population fraction of uniques is modelled as a Beta(alpha, beta)
    posterior with alpha = uniques + 1 and beta = (n - uniques) + 1; its
    posterior mean is scaled to the population size.

    Args:
        sample_uniques: Classes of size 1 in the sample
        sample_size: Records in the sample
        population_size: Assumed population size

    Returns:
        Estimated count of population uniques
    """
    if sample_size == 0:
        return 0

    alpha = sample_uniques + 1
    beta = (sample_size - sample_uniques) + 1
    expected_proportion = alpha / (alpha + beta)

    return round_half_up(expected_proportion * population_size)


def estimate_population_size(sample_size: int, multiplier: int, floor: int) -> int:
    """Assumed population size: max(sample * multiplier, floor)"""
    return max(sample_size * multiplier, floor)


def get_risk_level(risk: float) -> str:
    """Map an overall risk in [0, 1] to a Low/Medium/High label"""
    if risk >= RiskLevels.HIGH_THRESHOLD:
        return RiskLevels.HIGH
    if risk >= RiskLevels.MEDIUM_THRESHOLD:
        return RiskLevels.MEDIUM
    return RiskLevels.LOW


def _population_group_size(size: int, sample_size: int, population_size: int) -> int:
    return max(1, round_half_up((size / sample_size) * population_size))


class RiskEstimator:
    """Computes re-identification risk under three attacker models"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_engine_config()

    # ------------------------------------------------------------------
    # Attacker models
    # ------------------------------------------------------------------

    def prosecutor_risk(self, index: EquivalenceClassIndex) -> Tuple[float, List[float]]:
        """
        Attacker knows the target is in the table.

        Returns:
            (overall risk, per-class risks)
        """
        per_class = [1.0 / ec.size for ec in index]
        weighted = sum(risk * ec.size for risk, ec in zip(per_class, index))
        overall = min(1.0, safe_ratio(weighted, index.total_records))
        return overall, per_class

    def journalist_risk(self, index: EquivalenceClassIndex,
                        population_size: int) -> Tuple[float, List[float]]:
        """
        Attacker does not know whether the target is in the table.

        Sample-unique classes score a fixed 0.5; other classes are compared
        against their estimated population group size.
        """
        n = index.total_records
        per_class: List[float] = []
        weighted = 0.0

        for ec in index:
            if ec.size == 1:
                risk = RiskThresholds.JOURNALIST_UNIQUE_RISK
            else:
                population_group = _population_group_size(ec.size, n, population_size)
                risk = min(1.0, ec.size / population_group)
            per_class.append(risk)
            weighted += risk * ec.size

        if n == 0:
            return 0.0, per_class

        violations = index.count_smaller_than(RiskThresholds.VIOLATION_SIZE)
        penalty = min(RiskThresholds.JOURNALIST_PENALTY_CAP,
                      (violations / n) * RiskThresholds.VIOLATION_WEIGHT)
        return min(1.0, weighted / n + penalty), per_class

    def marketer_risk(self, index: EquivalenceClassIndex,
                      population_size: int) -> Tuple[float, List[float]]:
        """
        Attacker wants many matches rather than certain ones.

        Non-unique classes smaller than 5 receive a targeting boost of up to 40%.
        """
        n = index.total_records
        per_class: List[float] = []
        weighted = 0.0

        for ec in index:
            if ec.size == 1:
                risk = RiskThresholds.MARKETER_UNIQUE_RISK
            else:
                population_group = _population_group_size(ec.size, n, population_size)
                risk = ec.size / population_group
                if ec.size < RiskThresholds.MARKETER_BOOST_SIZE:
                    boost = min(RiskThresholds.MARKETER_BOOST_CAP,
                                (RiskThresholds.MARKETER_BOOST_SIZE - ec.size)
                                * RiskThresholds.MARKETER_BOOST_STEP)
                    risk = risk * (1 + boost)
                risk = min(1.0, risk)
            per_class.append(risk)
            weighted += risk * ec.size

        if n == 0:
            return 0.0, per_class

        violations = index.count_smaller_than(RiskThresholds.VIOLATION_SIZE)
        penalty = min(RiskThresholds.MARKETER_PENALTY_CAP,
                      (violations / n) * RiskThresholds.VIOLATION_WEIGHT)
        return min(1.0, weighted / n + penalty), per_class

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def generate_recommendations(self, prosecutor: float, journalist: float,
                                 marketer: float, index: EquivalenceClassIndex,
                                 k_threshold: int) -> List[str]:
        """Threshold rules over the three risks and the class sizes"""
        recommendations: List[str] = []
        unique_count = index.unique_count()
        total_records = index.total_records

        if prosecutor > RiskThresholds.PROSECUTOR_CRITICAL:
            recommendations.append(
                "CRITICAL: High prosecutor attack risk. Too many unique/small records."
            )
            recommendations.append("Action: Increase k-threshold or apply aggressive suppression")
        elif prosecutor > RiskThresholds.PROSECUTOR_MODERATE:
            recommendations.append("WARNING: Moderate prosecutor attack risk detected.")
            recommendations.append(
                f"Action: Consider suppressing records with k-anonymity < {k_threshold}"
            )

        if journalist > RiskThresholds.JOURNALIST_ELEVATED:
            recommendations.append(
                "Journalist attack risk is elevated. Consider sampling restrictions."
            )

        if marketer > RiskThresholds.MARKETER_SIGNIFICANT:
            recommendations.append("Marketer bulk targeting risk is significant.")
            recommendations.append(
                "Action: Apply L-Diversity or T-Closeness to sensitive attributes"
            )

        if unique_count > total_records * RiskThresholds.UNIQUE_RATIO:
            recommendations.append(
                f"High ratio of unique records ({unique_count}/{total_records})"
            )
            recommendations.append("Consider L-Diversity or synthetic data generation")

        small_groups = index.count_smaller_than(k_threshold)
        if small_groups > 0:
            recommendations.append(
                f"{small_groups} groups violate k-anonymity (k={k_threshold})"
            )

        if not recommendations:
            recommendations.append("Risk levels are acceptable. Data appears well-protected.")

        return recommendations

    # ------------------------------------------------------------------
    # Assessment
    # ------------------------------------------------------------------

    def assess(self, data: Sequence[Mapping[str, Any]],
               quasi_identifiers: Sequence[str],
               k_threshold: Optional[int] = None,
               attack_scenario: str = AttackScenarios.PROSECUTOR,
               population_size: Optional[int] = None) -> RiskMetrics:
        """
        Assess re-identification risk of a table

        Args:
            data: Table of records
            quasi_identifiers: Ordered quasi-identifier columns (may be empty)
            k_threshold: k used for violation counts and recommendations
            attack_scenario: Model reported as overall_risk
            population_size: Assumed population (derived from the sample if None)

        Returns:
            Risk metrics for the partition
        """
        table = validate_table(data, self.config)
        qi_fields = validate_column_names(quasi_identifiers)
        if k_threshold is None:
            k_threshold = self.config.default_k_threshold
        k_threshold = validate_positive_int(k_threshold, "k_threshold")
        if attack_scenario not in AttackScenarios.ALL:
            raise InvalidParameterError("attack_scenario", attack_scenario,
                                        f"must be one of {', '.join(AttackScenarios.ALL)}")
        if population_size is not None:
            population_size = validate_positive_int(population_size, "population_size")

        check_columns(table, qi_fields, self.config)

        index = EquivalenceClassIndex(table, qi_fields)
        n = index.total_records

        if population_size is None:
            population_size = estimate_population_size(
                n, self.config.population_multiplier, self.config.min_population_size
            )

        prosecutor, prosecutor_per_class = self.prosecutor_risk(index)
        journalist, journalist_per_class = self.journalist_risk(index, population_size)
        marketer, marketer_per_class = self.marketer_risk(index, population_size)

        unique_records = index.unique_count()
        classes: List[EquivalenceClassRisk] = []
        records_at_risk = 0
        successful_matches = 0
        violations = 0
        small_groups = 0

        for ec, p_risk, j_risk, m_risk in zip(index, prosecutor_per_class,
                                              journalist_per_class, marketer_per_class):
            classes.append(EquivalenceClassRisk(
                key=ec.key,
                size=ec.size,
                values=ec.qi_combination(qi_fields),
                records=[dict(record) for record in ec.records],
                risk_score=p_risk,
            ))
            if j_risk > RiskThresholds.RECORD_AT_RISK:
                records_at_risk += ec.size
            if m_risk > RiskThresholds.MATCH_CONFIDENCE:
                successful_matches += round_half_up(ec.size * m_risk)
            if ec.size < k_threshold:
                violations += ec.size
                if ec.size > 1:
                    small_groups += 1

        overall = {
            AttackScenarios.PROSECUTOR: prosecutor,
            AttackScenarios.JOURNALIST: journalist,
            AttackScenarios.MARKETER: marketer,
        }[attack_scenario]

        metrics = RiskMetrics(
            prosecutor_risk=prosecutor,
            journalist_risk=journalist,
            marketer_risk=marketer,
            equivalence_classes=classes,
            unique_records=unique_records,
            small_groups=small_groups,
            recommendations=self.generate_recommendations(
                prosecutor, journalist, marketer, index, k_threshold
            ),
            total_records=n,
            total_classes=len(index),
            k_threshold=k_threshold,
            violations=violations,
            max_risk=max(prosecutor_per_class, default=0.0),
            records_at_risk=records_at_risk,
            successful_matches=successful_matches,
            estimated_population_size=population_size,
            estimated_population_uniques=pitman_population_estimate(
                unique_records, n, population_size
            ),
            size_histogram=index.size_histogram(),
            attack_scenario=attack_scenario,
            overall_risk=overall,
            risk_level=get_risk_level(overall),
        )

        logger.info("Risk assessment completed",
                    records=n,
                    classes=len(index),
                    prosecutor_risk=round(prosecutor, 4),
                    journalist_risk=round(journalist, 4),
                    marketer_risk=round(marketer, 4),
                    risk_level=metrics.risk_level)

        return metrics


def assess_risk(data: Sequence[Mapping[str, Any]], quasi_identifiers: Sequence[str],
                k_threshold: Optional[int] = None,
                attack_scenario: str = AttackScenarios.PROSECUTOR) -> RiskMetrics:
    """Convenience function to assess re-identification risk"""
    return RiskEstimator().assess(data, quasi_identifiers, k_threshold, attack_scenario)
