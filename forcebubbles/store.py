"""
Entity store

Turns raw input rows into the validated entity list the layout engine
works on: aggregate codes are dropped, unparsable values become zero and,
on constrained devices, small entities are filtered out.
"""

from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Optional
import logging

from .data import is_excluded
from .layout.types import Entity
from .types import EntityRow, YearRange
from .utils import coerce_value

logger = logging.getLogger(__name__)


class EntityStore:
    """
    Filtered, validated entities

    Attributes:
        year_range: Inclusive (start, end) years of every series
        data: Rows left after the exclusion filter
        entities: Entities handed to the layout engine
    """

    def __init__(
        self,
        year_range: YearRange,
        data: List[EntityRow],
        entities: List[Entity]
    ) -> None:
        self.year_range: YearRange = year_range
        self.data: List[EntityRow] = data
        self.entities: List[Entity] = entities

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self):
        return iter(self.entities)

    @property
    def ids(self) -> List[str]:
        return [entity.id for entity in self.entities]

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, Any]],
        year_range: YearRange,
        constrained: bool = False,
        threshold: float = 500000
    ) -> 'EntityStore':
        """
        Build the store from raw rows

        Rows may already be processed ({'code', 'name', 'dseries'}) or be raw
        table rows with 'Country Code', 'Country Name' and one cell per year.
        Rows without a code are skipped, and a repeated code keeps only its
        first row.

        Args:
            rows: Input rows
            year_range: Inclusive (start, end) years
            constrained: Host device is resource constrained
            threshold: First-year value below which constrained devices drop an entity

        Returns:
            EntityStore
        """
        start, end = year_range
        processed = [process_row(row, year_range) for row in rows]

        data = []
        seen = set()
        n_excluded = 0
        for row in processed:
            code = row['code']
            if not code:
                logger.warning(f"Skipping row without a code (name={row['name']!r})")
                continue
            if is_excluded(code):
                n_excluded += 1
                continue
            if code in seen:
                logger.warning(f"Duplicate code {code}, keeping the first row")
                continue
            seen.add(code)
            data.append(row)
        if n_excluded:
            logger.debug(f"Excluded {n_excluded} aggregate rows")

        kept = data
        if constrained:
            kept = filter_constrained(data, threshold)
            logger.info(f"Constrained device: kept {len(kept)}/{len(data)} entities "
                        f"with first-year value >= {threshold:,.0f}")

        entities = [
            Entity(
                id=row['code'],
                name=row['name'],
                series=tuple(row['dseries']),
                start_year=start
            )
            for row in kept
        ]

        logger.info(f"Entity store: {len(entities)} entities, years {start}-{end}")
        return cls(year_range, data, entities)


def process_row(row: Mapping[str, Any], year_range: YearRange) -> EntityRow:
    """
    Normalise one input row

    Every year in range gets a value; missing or non-numeric cells become 0.

    Args:
        row: Processed or raw table row
        year_range: Inclusive (start, end) years

    Returns:
        EntityRow with exactly end - start + 1 values
    """
    start, end = year_range
    n_years = end - start + 1

    if 'dseries' in row:
        raw_series = list(row.get('dseries') or [])
        raw_series = (raw_series + [None] * n_years)[:n_years]
        code = row.get('code')
        name = row.get('name')
    else:
        raw_series = [_year_cell(row, year) for year in range(start, end + 1)]
        code = row.get('Country Code')
        name = row.get('Country Name')

    return {
        'code': '' if code is None else str(code),
        'name': '' if name is None else str(name),
        'dseries': [coerce_value(value) for value in raw_series],
    }


def _year_cell(row: Mapping[str, Any], year: int) -> Optional[Any]:
    """Cell for a year; table columns may be keyed by str or int"""
    if str(year) in row:
        return row[str(year)]
    return row.get(year)


def filter_constrained(rows: List[EntityRow], threshold: float) -> List[EntityRow]:
    """Drop rows whose first-year value is below threshold"""
    return [row for row in rows if row['dseries'] and row['dseries'][0] >= threshold]
