"""I/O utilities for ForceBubbles"""

from .readers import CSVReader, read_rows
from .writers import LayoutWriter, write_layout

__all__ = [
    'CSVReader', 'read_rows',
    'LayoutWriter', 'write_layout']
