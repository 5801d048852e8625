"""
Privacy techniques for the SDC engine
Risk estimation, k-anonymity, l-diversity, t-closeness, differential privacy
and synthetic data
"""

from .equivalence import EquivalenceClass, EquivalenceClassIndex, build_equivalence_classes
from .risk import RiskEstimator, assess_risk, pitman_population_estimate, get_risk_level
from .k_anonymity import KAnonymizer, check_k_anonymity, enforce_k_anonymity, generalize_value
from .l_diversity import LDiversityEnforcer, enforce_l_diversity
from .t_closeness import TClosenessEnforcer, enforce_t_closeness, total_variation_distance
from .dp_mechanisms import NoiseMechanism, laplace_noise, add_laplace_noise
from .synthetic import SyntheticSampler, generate_synthetic_data
from .utility import UtilityMeter, measure_utility

__all__ = [
    "EquivalenceClass",
    "EquivalenceClassIndex",
    "build_equivalence_classes",
    "RiskEstimator",
    "assess_risk",
    "pitman_population_estimate",
    "get_risk_level",
    "KAnonymizer",
    "check_k_anonymity",
    "enforce_k_anonymity",
    "generalize_value",
    "LDiversityEnforcer",
    "enforce_l_diversity",
    "TClosenessEnforcer",
    "enforce_t_closeness",
    "total_variation_distance",
    "NoiseMechanism",
    "laplace_noise",
    "add_laplace_noise",
    "SyntheticSampler",
    "generate_synthetic_data",
    "UtilityMeter",
    "measure_utility",
]
