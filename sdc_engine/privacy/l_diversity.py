"""
L-diversity enforcement for the SDC engine
Suppresses equivalence classes with too few distinct sensitive values
"""

from typing import List, Dict, Any, Optional, Sequence, Mapping

import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import Techniques
from ..models import LDiversityResult
from ..utils.validators import (
    safe_ratio,
    validate_table,
    validate_column_names,
    validate_column_name,
    validate_positive_int,
)
from .equivalence import EquivalenceClass, EquivalenceClassIndex, cell_text, check_columns

logger = structlog.get_logger(__name__)


def distinct_count(ec: EquivalenceClass, sensitive_field: str) -> int:
    """Distinct sensitive values in a class; a missing value counts as ''"""
    return len({cell_text(record, sensitive_field) for record in ec.records})


class LDiversityEnforcer:
    """Distinct l-diversity analyzer and enforcer"""

    def __init__(self, l: int = 2, config: Optional[EngineConfig] = None):  # noqa: E741
        self.l = validate_positive_int(l, "l")
        self.config = config or get_engine_config()

    def _prepare(self, data, qi_fields, sensitive_field):
        table = validate_table(data, self.config)
        qi_fields = validate_column_names(qi_fields, required=True)
        sensitive_field = validate_column_name(sensitive_field)
        check_columns(table, list(qi_fields) + [sensitive_field], self.config)
        return table, qi_fields, sensitive_field

    def check_l_diversity(self, data: Sequence[Mapping[str, Any]],
                          qi_fields: Sequence[str], sensitive_field: str) -> Dict[str, Any]:
        """Check l-diversity for sensitive attribute"""
        table, qi_fields, sensitive_field = self._prepare(data, qi_fields, sensitive_field)
        index = EquivalenceClassIndex(table, qi_fields)

        violations = []
        for ec in index:
            sensitive_values = sorted({cell_text(record, sensitive_field) for record in ec.records})
            if len(sensitive_values) < self.l:
                violations.append({
                    "qi_combination": ec.qi_combination(qi_fields),
                    "group_size": ec.size,
                    "unique_sensitive_values": len(sensitive_values),
                    "sensitive_values": sensitive_values,
                })

        return {
            "l_diverse": len(violations) == 0,
            "l_value": self.l,
            "violations": violations,
            "violation_count": len(violations),
            "total_groups": len(index),
            "sensitive_field": sensitive_field,
        }

    def anonymize(self, data: Sequence[Mapping[str, Any]],
                  qi_fields: Sequence[str], sensitive_field: str) -> LDiversityResult:
        """
        Keep classes with at least l distinct sensitive values, suppress the rest

        Returns:
            Processed table with diversity statistics
        """
        table, qi_fields, sensitive_field = self._prepare(data, qi_fields, sensitive_field)
        index = EquivalenceClassIndex(table, qi_fields)

        processed: List[Dict[str, Any]] = []
        diversities: List[int] = []
        suppressed_count = 0
        diverse_classes = 0

        for ec in index:
            diversity = distinct_count(ec, sensitive_field)
            diversities.append(diversity)
            if diversity >= self.l:
                processed.extend(dict(record) for record in ec.records)
                diverse_classes += 1
            else:
                suppressed_count += ec.size

        result = LDiversityResult(
            technique=Techniques.L_DIVERSITY,
            processed_table=processed,
            records_suppressed=suppressed_count,
            information_loss=safe_ratio(suppressed_count, len(table)),
            l_value=self.l,
            sensitive_attribute=sensitive_field,
            diverse_classes=diverse_classes,
            violating_classes=len(index) - diverse_classes,
            avg_diversity=safe_ratio(sum(diversities), len(diversities)),
        )

        logger.info("L-diversity applied",
                    l=self.l,
                    sensitive_field=sensitive_field,
                    diverse_classes=result.diverse_classes,
                    violating_classes=result.violating_classes,
                    suppressed=suppressed_count)

        return result


def enforce_l_diversity(data: Sequence[Mapping[str, Any]], qi_fields: Sequence[str],
                        sensitive_field: str, l: int = 2) -> LDiversityResult:  # noqa: E741
    """Convenience function to enforce l-diversity"""
    return LDiversityEnforcer(l).anonymize(data, qi_fields, sensitive_field)
