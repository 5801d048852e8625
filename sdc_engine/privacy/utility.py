"""
Utility measurement for the SDC engine
Compares a processed table against its source on numeric column means
"""

from typing import List, Any, Optional, Sequence, Mapping

import pandas as pd
import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import UtilityLevels
from ..models import ColumnUtility, UtilityMeasurement
from ..utils.validators import safe_ratio, validate_table, validate_fraction

logger = structlog.get_logger(__name__)


def get_utility_level(utility: float) -> str:
    """Map an overall utility score to its label"""
    if utility >= UtilityLevels.EXCELLENT_THRESHOLD:
        return UtilityLevels.EXCELLENT
    if utility >= UtilityLevels.GOOD_THRESHOLD:
        return UtilityLevels.GOOD
    if utility >= UtilityLevels.FAIR_THRESHOLD:
        return UtilityLevels.FAIR
    return UtilityLevels.POOR


def numeric_columns(df: pd.DataFrame) -> List[str]:
    return [
        column for column in df.columns
        if pd.api.types.is_numeric_dtype(df[column])
        and not pd.api.types.is_bool_dtype(df[column])
    ]


class UtilityMeter:
    """Measures how much analytical utility a processed table retains"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_engine_config()

    def column_metrics(self, original_df: pd.DataFrame,
                       processed_df: pd.DataFrame) -> List[ColumnUtility]:
        metrics: List[ColumnUtility] = []
        for column in numeric_columns(original_df):
            original_mean = original_df[column].mean()
            if pd.isna(original_mean) or original_mean == 0:
                continue

            processed_mean = None
            if column in processed_df.columns:
                mean = pd.to_numeric(processed_df[column], errors="coerce").mean()
                if not pd.isna(mean):
                    processed_mean = float(mean)

            preservation = 0.0
            if processed_mean is not None:
                drift = abs(original_mean - processed_mean) / abs(original_mean)
                preservation = max(0.0, min(1.0, 1 - drift))

            metrics.append(ColumnUtility(
                column=str(column),
                original_mean=float(original_mean),
                processed_mean=processed_mean,
                preservation=float(preservation),
            ))
        return metrics

    def measure(self, original: Sequence[Mapping[str, Any]],
                processed: Sequence[Mapping[str, Any]],
                information_loss: float = 0.0) -> UtilityMeasurement:
        """
        Measure utility of a processed table

        Args:
            original: Source table
            processed: Table produced by an anonymization technique
            information_loss: Loss reported by that technique

        Returns:
            Utility measurement with per-column mean preservation
        """
        original_table = validate_table(original, self.config)
        processed_table = validate_table(processed, self.config)
        information_loss = validate_fraction(information_loss, "information_loss")

        original_df = pd.DataFrame.from_records([dict(r) for r in original_table])
        processed_df = pd.DataFrame.from_records([dict(r) for r in processed_table])

        metrics = self.column_metrics(original_df, processed_df)
        statistical_similarity = min((m.preservation for m in metrics), default=1.0)
        record_retention = min(1.0, safe_ratio(len(processed_table), len(original_table)))
        overall = (statistical_similarity + record_retention + (1 - information_loss)) / 3

        measurement = UtilityMeasurement(
            overall_utility=overall,
            utility_level=get_utility_level(overall),
            statistical_similarity=statistical_similarity,
            record_retention=record_retention,
            information_loss=information_loss,
            column_metrics=metrics,
        )

        logger.info("Utility measured",
                    overall_utility=round(overall, 4),
                    utility_level=measurement.utility_level,
                    numeric_columns=len(metrics))

        return measurement


def measure_utility(original: Sequence[Mapping[str, Any]],
                    processed: Sequence[Mapping[str, Any]],
                    information_loss: float = 0.0) -> UtilityMeasurement:
    """Convenience function to measure utility"""
    return UtilityMeter().measure(original, processed, information_loss)
