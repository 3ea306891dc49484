"""
Type definitions for ForceBubbles

Common types used throughout the package for type checking and documentation.
"""

from __future__ import annotations
from typing import TypedDict, Literal, List, Tuple, Union, Callable
from pathlib import Path

# Type aliases
PathLike = Union[str, Path]
"""File path as string or Path object"""

YearRange = Tuple[int, int]
"""Inclusive (start_year, end_year) range"""

EaseFunction = Callable[[float], float]
"""Easing curve mapping normalised time [0, 1] to progress"""


TransitionKind = Literal['enter', 'update']
"""Entrance from zero radius, or a change of selected year"""

DragPhase = Literal['free', 'pinned']
"""Drag gesture state of an entity"""


# Structured data types

class EntityRow(TypedDict):
    """Validated input row: one entity with one value per year"""
    code: str
    name: str
    dseries: List[float]
