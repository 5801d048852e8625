"""
Synthetic data sampling for the SDC engine
Bootstrap resampling of whole rows with multiplicative jitter on numbers
"""

import math
from typing import List, Dict, Any, Optional, Sequence, Mapping

import numpy as np
import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import Techniques
from ..exceptions import TableTooLargeError
from ..models import SyntheticDataResult
from ..utils.rng import get_rng
from ..utils.validators import (
    is_numeric,
    to_float,
    validate_table,
    validate_column_names,
    validate_non_negative,
)

logger = structlog.get_logger(__name__)


def table_columns(data: Sequence[Mapping[str, Any]]) -> List[str]:
    """All column names in first-seen order"""
    columns: Dict[str, None] = {}
    for record in data:
        for column in record:
            columns.setdefault(column, None)
    return list(columns)


class SyntheticSampler:
    """
    Bootstrap-with-jitter synthetic table generator.

    Each synthetic row copies a uniformly drawn source row; numeric values
    are scaled by a factor drawn from [1 - jitter, 1 + jitter]. Joint
    structure is preserved only as far as copying whole rows preserves it.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 config: Optional[EngineConfig] = None):
        self.config = config or get_engine_config()
        self.rng = get_rng(rng, seed)

    def target_count(self, table_size: int, sample_percent: float) -> int:
        return math.floor(table_size * (sample_percent / 100))

    def synthesize_row(self, source: Mapping[str, Any], columns: Sequence[str],
                       position: Optional[int] = None) -> Dict[str, Any]:
        jitter = self.config.synthetic_jitter
        row: Dict[str, Any] = {}
        for column in columns:
            if column not in source:
                continue
            value = source[column]
            if is_numeric(value):
                row[column] = (to_float(value, column, position)
                               * float(self.rng.uniform(1 - jitter, 1 + jitter)))
            else:
                row[column] = value
        return row

    def generate(self, data: Sequence[Mapping[str, Any]], sample_percent: float = 100.0,
                 columns: Optional[Sequence[str]] = None) -> SyntheticDataResult:
        """
        Generate a synthetic table

        Args:
            data: Source table
            sample_percent: Synthetic size as a percentage of the source size
            columns: Columns to emit (all columns if None)

        Returns:
            Synthetic table; information_loss is a fixed placeholder
        """
        table = validate_table(data, self.config)
        sample_percent = validate_non_negative(sample_percent, "sample_percent")
        if columns is None:
            columns = table_columns(table)
        columns = validate_column_names(columns, field_name="columns")

        target = self.target_count(len(table), sample_percent) if table else 0
        if target > self.config.max_rows:
            logger.warning("Rejected oversized synthetic table",
                           target_count=target,
                           max_rows=self.config.max_rows)
            raise TableTooLargeError(target, self.config.max_rows)

        synthetic: List[Dict[str, Any]] = []
        for _ in range(target):
            position = int(self.rng.integers(0, len(table)))
            synthetic.append(self.synthesize_row(table[position], columns, position))

        result = SyntheticDataResult(
            technique=Techniques.SYNTHETIC_DATA,
            processed_table=synthetic,
            records_suppressed=0,
            information_loss=self.config.synthetic_information_loss,
            information_loss_is_estimate=True,
            sample_percent=sample_percent,
            target_count=target,
            columns=columns,
        )

        logger.info("Synthetic data generated",
                    source_records=len(table),
                    synthetic_records=len(synthetic),
                    sample_percent=sample_percent)

        return result


def generate_synthetic_data(data: Sequence[Mapping[str, Any]], sample_percent: float = 100.0,
                            columns: Optional[Sequence[str]] = None,
                            seed: Optional[int] = None) -> SyntheticDataResult:
    """Convenience function to generate a synthetic table"""
    return SyntheticSampler(seed=seed).generate(data, sample_percent, columns)
