"""
Equivalence class partitioning for the SDC engine
Groups records that share identical quasi-identifier values
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Iterator, Mapping, Optional, Sequence, Tuple

import structlog

from ..config import EngineConfig, get_engine_config
from ..constants import KEY_SEPARATOR, MISSING_VALUE, SIZE_HISTOGRAM_BUCKETS
from ..exceptions import MissingColumnError

logger = structlog.get_logger(__name__)


def cell_text(record: Mapping[str, Any], column: str) -> str:
    """Stringified cell value; absent and None both map to the empty string."""
    value = record.get(column)
    if value is None:
        return MISSING_VALUE
    return str(value)


def make_key(record: Mapping[str, Any], columns: Sequence[str]) -> str:
    """Equivalence class key for a record"""
    return KEY_SEPARATOR.join(cell_text(record, column) for column in columns)


def find_missing_columns(table: Sequence[Mapping[str, Any]],
                         columns: Sequence[str]) -> List[str]:
    """Columns that appear in no record of a non-empty table"""
    if not table:
        return []
    present = set()
    for record in table:
        present.update(record.keys())
    return [column for column in columns if column not in present]


def check_columns(table: Sequence[Mapping[str, Any]], columns: Sequence[str],
                  config: Optional[EngineConfig] = None) -> List[str]:
    """
    Resolve requested columns against the table.

    Missing columns are read as all-empty values unless strict mode is on.

    Raises:
        MissingColumnError: In strict mode, if any column is absent from every record
    """
    config = config or get_engine_config()
    missing = find_missing_columns(table, columns)
    if missing:
        if config.strict_columns:
            raise MissingColumnError(missing)
        logger.warning("Columns absent from every record, treating as empty",
                       columns=missing)
    return missing


@dataclass
class EquivalenceClass:
    """Records sharing one quasi-identifier projection"""
    key: str
    values: Tuple[Any, ...]
    records: List[Mapping[str, Any]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.records)

    def qi_combination(self, columns: Sequence[str]) -> Dict[str, Any]:
        return dict(zip(columns, self.values))


class EquivalenceClassIndex:
    """
    Partition of a table by quasi-identifier values.

    Classes iterate in the order their key was first seen. Every record of
    the source table lands in exactly one class.
    """

    def __init__(self, table: Sequence[Mapping[str, Any]],
                 quasi_identifiers: Sequence[str]):
        self.quasi_identifiers = list(quasi_identifiers)
        self.total_records = len(table)
        self._classes: Dict[str, EquivalenceClass] = {}

        for record in table:
            key = make_key(record, self.quasi_identifiers)
            ec = self._classes.get(key)
            if ec is None:
                values = tuple(record.get(column) for column in self.quasi_identifiers)
                ec = EquivalenceClass(key=key, values=values)
                self._classes[key] = ec
            ec.records.append(record)

        logger.debug("Equivalence classes built",
                     records=self.total_records,
                     classes=len(self._classes),
                     qi_fields=self.quasi_identifiers)

    @property
    def classes(self) -> List[EquivalenceClass]:
        return list(self._classes.values())

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[EquivalenceClass]:
        return iter(self._classes.values())

    def get(self, key: str) -> Optional[EquivalenceClass]:
        return self._classes.get(key)

    def sizes(self) -> List[int]:
        return [ec.size for ec in self._classes.values()]

    def unique_count(self) -> int:
        """Number of classes holding a single record"""
        return sum(1 for ec in self._classes.values() if ec.size == 1)

    def count_smaller_than(self, size: int) -> int:
        return sum(1 for ec in self._classes.values() if ec.size < size)

    def size_histogram(self) -> Dict[str, int]:
        """Class counts per size bucket"""
        histogram = {label: 0 for label, _, _ in SIZE_HISTOGRAM_BUCKETS}
        for ec in self._classes.values():
            for label, lower, upper in SIZE_HISTOGRAM_BUCKETS:
                if lower <= ec.size <= upper:
                    histogram[label] += 1
                    break
        return histogram


def build_equivalence_classes(table: Sequence[Mapping[str, Any]],
                              quasi_identifiers: Sequence[str]) -> EquivalenceClassIndex:
    """Convenience function to partition a table"""
    return EquivalenceClassIndex(table, quasi_identifiers)
