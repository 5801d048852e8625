"""
K-anonymity enforcement for the SDC engine
Privacy protection through record suppression and quasi-identifier generalization
"""

import math
import numbers
from typing import List, Dict, Any, Optional, Sequence, Mapping

import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import Techniques
from ..models import KAnonymityResult
from ..utils.validators import (
    is_numeric,
    round_half_up,
    safe_ratio,
    validate_table,
    validate_column_names,
    validate_positive_int,
    validate_fraction,
)
from .equivalence import EquivalenceClassIndex, check_columns, make_key

logger = structlog.get_logger(__name__)


def generalize_value(value: Any, bucket_width: int = 10, mask_token: str = "*") -> Any:
    """
    Generalize a quasi-identifier value.

    Numbers become a "lower-upper" range label whose lower bound is the
    nearest lower multiple of bucket_width; anything else is masked.
    """
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        # Integer arithmetic; ints may exceed the float range
        lower = int(value) // bucket_width * bucket_width
        return f"{lower}-{lower + bucket_width - 1}"
    if is_numeric(value) and math.isfinite(value):
        lower = int(math.floor(value / bucket_width) * bucket_width)
        upper = lower + bucket_width - 1
        return f"{lower}-{upper}"
    return mask_token


class KAnonymizer:
    """K-anonymity analyzer and enforcer"""

    def __init__(self, k: int = 3, suppression_limit: float = 0.1,
                 config: Optional[EngineConfig] = None):
        self.k = validate_positive_int(k, "k")
        self.suppression_limit = validate_fraction(suppression_limit, "suppression_limit")
        self.config = config or get_engine_config()

    def generalize_record(self, record: Mapping[str, Any],
                          qi_fields: Sequence[str]) -> Dict[str, Any]:
        """Copy of record with every present quasi-identifier generalized"""
        generalized = dict(record)
        for field in qi_fields:
            if field in generalized:
                generalized[field] = generalize_value(
                    generalized[field],
                    self.config.generalization_bucket_width,
                    self.config.mask_token,
                )
        return generalized

    def check_k_anonymity(self, data: Sequence[Mapping[str, Any]],
                          qi_fields: Sequence[str]) -> Dict[str, Any]:
        """
        Check k-anonymity of dataset

        Returns:
            Analysis results including violations and statistics
        """
        table = validate_table(data, self.config)
        qi_fields = validate_column_names(qi_fields, required=True)
        check_columns(table, qi_fields, self.config)
        index = EquivalenceClassIndex(table, qi_fields)

        group_sizes = index.sizes()
        violations = []
        positions: Dict[str, List[int]] = {}
        for position, record in enumerate(table):
            positions.setdefault(make_key(record, qi_fields), []).append(position)

        for ec in index:
            if ec.size < self.k:
                violations.append({
                    "qi_combination": ec.qi_combination(qi_fields),
                    "group_size": ec.size,
                    "record_indices": positions.get(ec.key, []),
                })

        result = {
            "k_anonymous": len(violations) == 0,
            "k_value": self.k,
            "min_group_size": min(group_sizes) if group_sizes else 0,
            "max_group_size": max(group_sizes) if group_sizes else 0,
            "avg_group_size": safe_ratio(sum(group_sizes), len(group_sizes)),
            "total_groups": len(index),
            "violations": violations,
            "violation_count": len(violations),
            "total_records": len(table),
            "qi_fields": qi_fields,
        }

        logger.info("K-anonymity check completed",
                    k_anonymous=result["k_anonymous"],
                    violations=len(violations),
                    min_group_size=result["min_group_size"])

        return result

    def anonymize(self, data: Sequence[Mapping[str, Any]],
                  qi_fields: Sequence[str]) -> KAnonymityResult:
        """
        Enforce k-anonymity through suppression and generalization

        Undersized classes are suppressed while the suppression budget
        floor(n * suppression_limit) allows; once it is exhausted every
        further undersized class is generalized instead.

        Returns:
            Processed table with group statistics
        """
        table = validate_table(data, self.config)
        qi_fields = validate_column_names(qi_fields, required=True)
        check_columns(table, qi_fields, self.config)

        index = EquivalenceClassIndex(table, qi_fields)
        max_suppressed = math.floor(len(table) * self.suppression_limit)

        processed: List[Dict[str, Any]] = []
        kept_sizes: List[int] = []
        suppressed_count = 0
        generalized_count = 0

        for ec in index:
            if ec.size >= self.k:
                processed.extend(dict(record) for record in ec.records)
                kept_sizes.append(ec.size)
            elif suppressed_count + ec.size <= max_suppressed:
                suppressed_count += ec.size
            else:
                processed.extend(self.generalize_record(record, qi_fields)
                                 for record in ec.records)
                kept_sizes.append(ec.size)
                generalized_count += ec.size

        if generalized_count:
            logger.warning("Suppression budget exhausted, generalized remaining groups",
                           generalized_records=generalized_count,
                           max_suppressed=max_suppressed)

        min_group_size = min(kept_sizes) if kept_sizes else 0
        result = KAnonymityResult(
            technique=Techniques.K_ANONYMITY,
            processed_table=processed,
            records_suppressed=suppressed_count,
            information_loss=safe_ratio(suppressed_count, len(table)),
            k_value=self.k,
            records_generalized=generalized_count,
            equivalence_class_count=len(kept_sizes),
            avg_group_size=safe_ratio(sum(kept_sizes), len(kept_sizes)),
            min_group_size=min_group_size,
            max_group_size=max(kept_sizes) if kept_sizes else 0,
            privacy_risk=min(100, round_half_up((min_group_size / self.k) * 100)),
        )

        logger.info("K-anonymity applied",
                    k=self.k,
                    total_records=len(table),
                    suppressed=suppressed_count,
                    generalized=generalized_count,
                    remaining_records=len(processed))

        return result


def check_k_anonymity(data: Sequence[Mapping[str, Any]], k: int = 3,
                      qi_fields: Sequence[str] = ()) -> bool:
    """Convenience function to check k-anonymity"""
    anonymizer = KAnonymizer(k)
    analysis = anonymizer.check_k_anonymity(data, qi_fields)
    return analysis["k_anonymous"]


def enforce_k_anonymity(data: Sequence[Mapping[str, Any]], k: int = 3,
                        qi_fields: Sequence[str] = (),
                        suppression_limit: float = 0.1) -> KAnonymityResult:
    """Convenience function to enforce k-anonymity"""
    anonymizer = KAnonymizer(k, suppression_limit)
    return anonymizer.anonymize(data, qi_fields)
