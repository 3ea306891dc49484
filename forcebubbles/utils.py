"""
Utility functions

General-purpose utilities used across ForceBubbles modules.
"""

from __future__ import annotations
from typing import Any
import math

from .data import resource_key


def flag_href(code: str, image_dir: str = 'img') -> str:
    """
    Path of the flag image for an entity code

    Args:
        code: ISO-3 entity code
        image_dir: Directory holding <iso2>.svg flag images

    Returns:
        e.g. 'img/us.svg', or '' when the code has no flag
    """
    key = resource_key(code)
    if key is None:
        return ''
    return f"{image_dir}/{key}.svg"


def coerce_value(raw: Any) -> float:
    """
    Coerce a raw cell to a finite float

    Missing, blank, non-numeric, NaN and infinite cells become 0.0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value
