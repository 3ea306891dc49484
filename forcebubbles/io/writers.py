"""
I/O Writers

Handles writing of layout snapshots.
"""

import pandas as pd
from pathlib import Path
import logging

from ..data import resource_key

logger = logging.getLogger(__name__)

LAYOUT_COLUMNS = ['id', 'name', 'year', 'value', 'x', 'y', 'radius', 'target_radius', 'flag']


class LayoutWriter:
    """Writes the current layout in TSV format"""

    def __init__(self, precision=3):
        """
        Initialize layout writer

        Args:
            precision: Decimal places for coordinates and radii
        """
        self.precision = precision

    def to_dataframe(self, state):
        """
        One row per entity for the selected year

        Args:
            state: LayoutState to snapshot

        Returns:
            DataFrame with LAYOUT_COLUMNS
        """
        year = state.selected_year
        records = [
            {
                'id': entity.id,
                'name': entity.name,
                'year': year,
                'value': entity.value_at(year),
                'x': entity.x,
                'y': entity.y,
                'radius': entity.current_radius,
                'target_radius': entity.target_radius,
                'flag': resource_key(entity.id) or '',
            }
            for entity in state.entities
        ]
        df = pd.DataFrame.from_records(records, columns=LAYOUT_COLUMNS)
        for col in ['x', 'y', 'radius', 'target_radius']:
            df[col] = df[col].round(self.precision)
        return df

    def write(self, state, output_file):
        """
        Write a layout snapshot to a TSV file

        Args:
            state: LayoutState to snapshot
            output_file: Path to output TSV file
        """
        if len(state) == 0:
            logger.warning("No entities to save")
            return

        Path(output_file).parent.mkdir(parents=True, exist_ok=True)
        df = self.to_dataframe(state)
        df.to_csv(output_file, sep='\t', index=False)
        logger.info(f"Layout saved: {output_file} ({len(df)} entities, year {state.selected_year})")


def write_layout(state, output_file, precision=3):
    """
    Convenience function to write a layout snapshot

    Args:
        state: LayoutState to snapshot
        output_file: Path to output TSV file
        precision: Decimal places for coordinates and radii
    """
    LayoutWriter(precision).write(state, output_file)
