"""
T-closeness enforcement for the SDC engine
Suppresses equivalence classes whose sensitive-value distribution drifts
too far from the table-wide distribution
"""

from collections import Counter
from typing import List, Dict, Any, Optional, Sequence, Mapping, Iterable

import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import Techniques, DISTANCE_TOLERANCE
from ..models import TClosenessResult
from ..utils.validators import (
    safe_ratio,
    validate_table,
    validate_column_names,
    validate_column_name,
    validate_fraction,
)
from .equivalence import EquivalenceClassIndex, cell_text, check_columns

logger = structlog.get_logger(__name__)


def value_distribution(records: Iterable[Mapping[str, Any]], field: str) -> Dict[str, float]:
    """Relative frequency of each stringified value of field"""
    counts = Counter(cell_text(record, field) for record in records)
    total = sum(counts.values())
    return {value: count / total for value, count in counts.items()} if total else {}


def total_variation_distance(dist1: Dict[str, float], dist2: Dict[str, float]) -> float:
    """
    Half the L1 distance between two categorical distributions.

    Stands in for Earth Mover's Distance with a unit ground distance
    between every pair of distinct values.
    """
    all_values = set(dist1) | set(dist2)
    return 0.5 * sum(abs(dist1.get(value, 0.0) - dist2.get(value, 0.0))
                     for value in all_values)


class TClosenessEnforcer:
    """T-closeness analyzer and enforcer"""

    def __init__(self, t: float = 0.2, config: Optional[EngineConfig] = None):
        self.t = validate_fraction(t, "t")
        self.config = config or get_engine_config()

    def anonymize(self, data: Sequence[Mapping[str, Any]],
                  qi_fields: Sequence[str], sensitive_field: str) -> TClosenessResult:
        """
        Keep classes within distance t of the global distribution

        Returns:
            Processed table with distance statistics
        """
        table = validate_table(data, self.config)
        qi_fields = validate_column_names(qi_fields, required=True)
        sensitive_field = validate_column_name(sensitive_field)
        check_columns(table, list(qi_fields) + [sensitive_field], self.config)

        global_dist = value_distribution(table, sensitive_field)
        index = EquivalenceClassIndex(table, qi_fields)

        processed: List[Dict[str, Any]] = []
        distances: List[float] = []
        suppressed_count = 0
        satisfying_classes = 0

        for ec in index:
            distance = total_variation_distance(global_dist,
                                                value_distribution(ec.records, sensitive_field))
            distances.append(distance)
            if distance <= self.t + DISTANCE_TOLERANCE:
                processed.extend(dict(record) for record in ec.records)
                satisfying_classes += 1
            else:
                suppressed_count += ec.size

        result = TClosenessResult(
            technique=Techniques.T_CLOSENESS,
            processed_table=processed,
            records_suppressed=suppressed_count,
            information_loss=safe_ratio(suppressed_count, len(table)),
            t_value=self.t,
            sensitive_attribute=sensitive_field,
            satisfying_classes=satisfying_classes,
            violating_classes=len(index) - satisfying_classes,
            avg_distance=safe_ratio(sum(distances), len(distances)),
            max_distance=max(distances, default=0.0),
            global_distribution=global_dist,
        )

        logger.info("T-closeness applied",
                    t=self.t,
                    sensitive_field=sensitive_field,
                    satisfying_classes=satisfying_classes,
                    violating_classes=result.violating_classes,
                    max_distance=round(result.max_distance, 4),
                    suppressed=suppressed_count)

        return result


def enforce_t_closeness(data: Sequence[Mapping[str, Any]], qi_fields: Sequence[str],
                        sensitive_field: str, t: float = 0.2) -> TClosenessResult:
    """Convenience function to enforce t-closeness"""
    return TClosenessEnforcer(t).anonymize(data, qi_fields, sensitive_field)
