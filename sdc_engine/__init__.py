"""
SDC Engine
Statistical disclosure control: re-identification risk and anonymization
"""

__version__ = "0.1.0"

# Core exports
from .config import EngineConfig, get_engine_config

# Errors
from .exceptions import (
    EngineError, InvalidParameterError, InvalidTableError,
    TableTooLargeError, MissingColumnError
)

# Result models
from .models import (
    RiskMetrics, EquivalenceClassRisk, AnonymizationResult,
    KAnonymityResult, LDiversityResult, TClosenessResult,
    DifferentialPrivacyResult, SyntheticDataResult, UtilityMeasurement
)

# Privacy techniques
from .privacy import (
    EquivalenceClassIndex, RiskEstimator, assess_risk,
    KAnonymizer, LDiversityEnforcer, TClosenessEnforcer,
    NoiseMechanism, SyntheticSampler, UtilityMeter, measure_utility
)

__all__ = [
    # Config
    "EngineConfig",
    "get_engine_config",

    # Errors
    "EngineError",
    "InvalidParameterError",
    "InvalidTableError",
    "TableTooLargeError",
    "MissingColumnError",

    # Models
    "RiskMetrics",
    "EquivalenceClassRisk",
    "AnonymizationResult",
    "KAnonymityResult",
    "LDiversityResult",
    "TClosenessResult",
    "DifferentialPrivacyResult",
    "SyntheticDataResult",
    "UtilityMeasurement",

    # Privacy
    "EquivalenceClassIndex",
    "RiskEstimator",
    "assess_risk",
    "KAnonymizer",
    "LDiversityEnforcer",
    "TClosenessEnforcer",
    "NoiseMechanism",
    "SyntheticSampler",
    "UtilityMeter",
    "measure_utility",
]
