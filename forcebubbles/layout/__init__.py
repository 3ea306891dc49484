"""
Layout Module for ForceBubbles
Circle packing and force relaxation for animated bubble layouts

Public API:
    - PackingInitializer: Initial positions by circle packing
    - ForceSimulation: Force relaxation engine
    - LayoutState: Shared per-session state
    - Entity: One bubble
    - Transition: Radius tween in flight
    - DragState: Drag gesture state
"""

from .packing import PackingInitializer, Circle, pack_siblings, enclose
from .forces import ForceSimulation, find_overlaps
from .types import (
    LayoutState,
    Entity,
    Transition,
    DragState,
    radius_for_value,
)

__all__ = [
    'PackingInitializer',
    'Circle',
    'pack_siblings',
    'enclose',
    'ForceSimulation',
    'find_overlaps',
    'LayoutState',
    'Entity',
    'Transition',
    'DragState',
    'radius_for_value',
]
