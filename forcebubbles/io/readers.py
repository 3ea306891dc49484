"""
I/O Readers

Handles reading of input tables.
"""

from __future__ import annotations
from typing import List, Optional
import pandas as pd
from pathlib import Path
import logging

from ..types import EntityRow, PathLike, YearRange
from ..store import process_row

logger = logging.getLogger(__name__)

CODE_COLUMN = 'Country Code'
NAME_COLUMN = 'Country Name'


class CSVReader:
    """Reads per-entity, per-year tables (World Bank layout)"""

    @staticmethod
    def load_table(csv_file: PathLike) -> pd.DataFrame:
        """
        Load a table with one row per entity and one column per year

        Tries a plain CSV with the header on the first line, then the World
        Bank download layout with four metadata lines above the header.

        Args:
            csv_file: Path to CSV file

        Returns:
            DataFrame with string column names

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If no layout yields the code and name columns
        """
        if not Path(csv_file).exists():
            raise FileNotFoundError(f"Input file not found: {csv_file}")

        table: Optional[pd.DataFrame] = None
        for skiprows in [0, 4]:
            try:
                candidate = pd.read_csv(csv_file, skiprows=skiprows, dtype=str,
                                        keep_default_na=False)
            except (pd.errors.ParserError, pd.errors.EmptyDataError):
                continue
            candidate.columns = [str(col).strip() for col in candidate.columns]
            if CODE_COLUMN in candidate.columns and NAME_COLUMN in candidate.columns:
                table = candidate
                break

        if table is None:
            raise ValueError(f"No '{CODE_COLUMN}'/'{NAME_COLUMN}' columns found in {csv_file}")

        # Trailing commas in World Bank files produce an empty column
        table = table.loc[:, [col for col in table.columns if not col.startswith('Unnamed')]]
        logger.debug(f"Loaded table {csv_file}: {table.shape[0]} rows, {table.shape[1]} columns")
        return table

    @staticmethod
    def read_rows(csv_file: PathLike, year_range: YearRange) -> List[EntityRow]:
        """
        Read rows ready for EntityStore

        Year columns absent from the file, blank cells and unparsable cells
        all become 0.

        Args:
            csv_file: Path to CSV file
            year_range: Inclusive (start, end) years

        Returns:
            List of EntityRow dicts
        """
        table = CSVReader.load_table(csv_file)
        start, end = year_range

        missing = [str(year) for year in range(start, end + 1) if str(year) not in table.columns]
        if missing:
            logger.warning(f"{len(missing)} year columns missing from {csv_file}, "
                           f"treated as 0: {', '.join(missing[:5])}"
                           f"{'...' if len(missing) > 5 else ''}")

        years = [str(year) for year in range(start, end + 1) if str(year) in table.columns]
        values = table[years].apply(pd.to_numeric, errors='coerce').fillna(0.0)

        rows: List[EntityRow] = []
        for idx in table.index:
            raw = {
                CODE_COLUMN: table.at[idx, CODE_COLUMN].strip(),
                NAME_COLUMN: table.at[idx, NAME_COLUMN].strip(),
            }
            raw.update({year: float(values.at[idx, year]) for year in years})
            rows.append(process_row(raw, year_range))

        logger.info(f"Read {len(rows)} rows from {csv_file}")
        return rows


def read_rows(csv_file: PathLike, year_range: YearRange) -> List[EntityRow]:
    """
    Convenience function to read input rows

    Args:
        csv_file: Path to CSV file
        year_range: Inclusive (start, end) years

    Returns:
        List of EntityRow dicts
    """
    return CSVReader.read_rows(csv_file, year_range)
