"""
Constants for the SDC Engine

Centralized thresholds, labels and error codes used by the risk
estimator, the anonymization techniques and the API layer.
"""

from typing import Final, Tuple

# =============================================================================
# SERVICE IDENTIFICATION
# =============================================================================

SERVICE_NAME: Final[str] = "sdc-engine"
SERVICE_VERSION: Final[str] = "0.1.0"

# =============================================================================
# PARTITIONING
# =============================================================================

# ASCII unit separator: not expected inside ordinary cell text
KEY_SEPARATOR: Final[str] = "\x1f"
MISSING_VALUE: Final[str] = ""


# =============================================================================
# TECHNIQUES
# =============================================================================

class Techniques:
    """Technique identifiers reported on every result"""
    K_ANONYMITY: Final[str] = "k-anonymity"
    L_DIVERSITY: Final[str] = "l-diversity"
    T_CLOSENESS: Final[str] = "t-closeness"
    DIFFERENTIAL_PRIVACY: Final[str] = "differential-privacy"
    SYNTHETIC_DATA: Final[str] = "synthetic-data"

    ALL: Final[Tuple[str, ...]] = (
        K_ANONYMITY, L_DIVERSITY, T_CLOSENESS, DIFFERENTIAL_PRIVACY, SYNTHETIC_DATA
    )


# =============================================================================
# ATTACK SCENARIOS
# =============================================================================

class AttackScenarios:
    """Attacker-knowledge models"""
    PROSECUTOR: Final[str] = "prosecutor"
    JOURNALIST: Final[str] = "journalist"
    MARKETER: Final[str] = "marketer"

    ALL: Final[Tuple[str, ...]] = (PROSECUTOR, JOURNALIST, MARKETER)


class RiskThresholds:
    """Scores and cut-offs for the attacker models and recommendations"""
    JOURNALIST_UNIQUE_RISK: Final[float] = 0.5
    JOURNALIST_PENALTY_CAP: Final[float] = 0.3
    MARKETER_UNIQUE_RISK: Final[float] = 0.6
    MARKETER_PENALTY_CAP: Final[float] = 0.25
    MARKETER_BOOST_CAP: Final[float] = 0.4
    MARKETER_BOOST_STEP: Final[float] = 0.1
    MARKETER_BOOST_SIZE: Final[int] = 5
    VIOLATION_WEIGHT: Final[float] = 0.5
    VIOLATION_SIZE: Final[int] = 2

    # Recommendation rules
    PROSECUTOR_CRITICAL: Final[float] = 0.4
    PROSECUTOR_MODERATE: Final[float] = 0.2
    JOURNALIST_ELEVATED: Final[float] = 0.3
    MARKETER_SIGNIFICANT: Final[float] = 0.25
    UNIQUE_RATIO: Final[float] = 0.1

    # Reporting
    RECORD_AT_RISK: Final[float] = 0.2
    MATCH_CONFIDENCE: Final[float] = 0.3


class RiskLevels:
    """Overall risk level labels"""
    LOW: Final[str] = "Low"
    MEDIUM: Final[str] = "Medium"
    HIGH: Final[str] = "High"

    HIGH_THRESHOLD: Final[float] = 0.4
    MEDIUM_THRESHOLD: Final[float] = 0.2


# Equivalence class size histogram buckets: (label, lower, upper inclusive)
SIZE_HISTOGRAM_BUCKETS: Final[Tuple[Tuple[str, int, float], ...]] = (
    ("1", 1, 1),
    ("2-4", 2, 4),
    ("5-10", 5, 10),
    (">10", 11, float("inf")),
)

# =============================================================================
# T-CLOSENESS
# =============================================================================

DISTANCE_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# UTILITY
# =============================================================================

class UtilityLevels:
    """Utility level labels and their lower bounds"""
    EXCELLENT: Final[str] = "Excellent"
    GOOD: Final[str] = "Good"
    FAIR: Final[str] = "Fair"
    POOR: Final[str] = "Poor"

    EXCELLENT_THRESHOLD: Final[float] = 0.9
    GOOD_THRESHOLD: Final[float] = 0.75
    FAIR_THRESHOLD: Final[float] = 0.5


# =============================================================================
# ERROR CODES
# =============================================================================

class ErrorCodes:
    """Standardized error codes for the engine"""
    ENGINE_ERROR: Final[str] = "ENGINE_ERROR"
    INVALID_PARAMETER: Final[str] = "INVALID_PARAMETER"
    INVALID_TABLE: Final[str] = "INVALID_TABLE"
    TABLE_TOO_LARGE: Final[str] = "TABLE_TOO_LARGE"
    MISSING_COLUMN: Final[str] = "MISSING_COLUMN"
