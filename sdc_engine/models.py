"""
Result data models for the SDC engine
Risk metrics, anonymization results and utility measurements
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from .constants import AttackScenarios, RiskLevels


Record = Dict[str, Any]


class EquivalenceClassRisk(BaseModel):
    """Equivalence class with its attached prosecutor risk"""
    key: str = Field(..., description="Joined quasi-identifier projection")
    size: int = Field(..., ge=0)
    values: Dict[str, Any] = Field(default_factory=dict, description="Quasi-identifier values")
    records: List[Record] = Field(default_factory=list)
    risk_score: float = Field(default=0.0, ge=0.0, le=1.0)


class RiskMetrics(BaseModel):
    """Re-identification risk under the three attacker models"""
    prosecutor_risk: float = Field(default=0.0, ge=0.0, le=1.0)
    journalist_risk: float = Field(default=0.0, ge=0.0, le=1.0)
    marketer_risk: float = Field(default=0.0, ge=0.0, le=1.0)
    equivalence_classes: List[EquivalenceClassRisk] = Field(default_factory=list)
    unique_records: int = 0
    small_groups: int = 0
    recommendations: List[str] = Field(default_factory=list)

    # Summary
    total_records: int = 0
    total_classes: int = 0
    k_threshold: int = 1
    violations: int = Field(default=0, description="Records in classes smaller than k")
    max_risk: float = 0.0
    records_at_risk: int = 0
    successful_matches: int = 0
    estimated_population_size: int = 0
    estimated_population_uniques: int = 0
    size_histogram: Dict[str, int] = Field(default_factory=dict)

    # Scenario selection
    attack_scenario: str = AttackScenarios.PROSECUTOR
    overall_risk: float = 0.0
    risk_level: str = RiskLevels.LOW


class AnonymizationResult(BaseModel):
    """Common fields of every technique result"""
    technique: str
    processed_table: List[Record] = Field(default_factory=list)
    records_suppressed: int = 0
    information_loss: float = Field(default=0.0, ge=0.0, le=1.0)
    information_loss_is_estimate: bool = Field(
        default=False,
        description="True when information_loss is a heuristic, not a measurement"
    )


class KAnonymityResult(AnonymizationResult):
    k_value: int
    records_generalized: int = 0
    equivalence_class_count: int = 0
    avg_group_size: float = 0.0
    min_group_size: int = 0
    max_group_size: int = 0
    privacy_risk: int = Field(default=0, ge=0, le=100, description="Safety score")


class LDiversityResult(AnonymizationResult):
    l_value: int
    sensitive_attribute: str
    diverse_classes: int = 0
    violating_classes: int = 0
    avg_diversity: float = 0.0


class TClosenessResult(AnonymizationResult):
    t_value: float
    sensitive_attribute: str
    satisfying_classes: int = 0
    violating_classes: int = 0
    avg_distance: float = 0.0
    max_distance: float = 0.0
    global_distribution: Dict[str, float] = Field(default_factory=dict)


class DifferentialPrivacyResult(AnonymizationResult):
    epsilon: float
    mechanism: str = "laplace"
    columns: List[str] = Field(default_factory=list)
    sensitivity: Dict[str, float] = Field(default_factory=dict)
    mean_absolute_noise: float = 0.0


class SyntheticDataResult(AnonymizationResult):
    sample_percent: float
    target_count: int = 0
    columns: List[str] = Field(default_factory=list)


class ColumnUtility(BaseModel):
    column: str
    original_mean: float
    processed_mean: Optional[float] = None
    preservation: float = 0.0


class UtilityMeasurement(BaseModel):
    """Utility retained by a processed table relative to its source"""
    overall_utility: float = 0.0
    utility_level: str
    statistical_similarity: float = 1.0
    record_retention: float = 0.0
    information_loss: float = 0.0
    column_metrics: List[ColumnUtility] = Field(default_factory=list)
