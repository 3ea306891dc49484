"""
Interaction handler

Drag gestures: dragging pins an entity so the relaxation engine cannot
move it, while every other entity keeps reacting to it.

    free --drag_start--> pinned --drag_move*--> pinned --drag_end--> free
"""

from __future__ import annotations
from typing import Optional
import logging

from .layout.types import LayoutState, Entity
from .layout.forces import ForceSimulation

logger = logging.getLogger(__name__)


class InteractionHandler:
    """Per-entity drag state machines bound to one simulation"""

    def __init__(self, state: LayoutState, simulation: ForceSimulation, force_config):
        """
        Initialize interaction handler

        Args:
            state: Shared layout state
            simulation: Force simulation to reheat while dragging
            force_config: Force configuration (drag_alpha_target)
        """
        self.state = state
        self.simulation = simulation
        self.drag_alpha_target: float = force_config.drag_alpha_target

    def _lookup(self, entity_id: str, event: str) -> Optional[Entity]:
        entity = self.state.get(entity_id)
        if entity is None:
            logger.debug(f"Ignoring {event} for unknown entity {entity_id!r}")
        return entity

    def drag_start(self, entity_id: str) -> bool:
        """
        Pin an entity at its current position

        When no other drag is in progress the simulation is reheated so that
        neighbours react to the pinned entity.

        Returns:
            True if the entity is now pinned
        """
        entity = self._lookup(entity_id, 'drag start')
        if entity is None:
            return False
        if entity.drag.active:
            logger.debug(f"Drag already in progress for {entity_id}")
            return True

        if self.state.active_drags == 0:
            self.simulation.set_alpha_target(self.drag_alpha_target)
            if self.simulation.alpha < self.drag_alpha_target:
                self.simulation.reheat(self.drag_alpha_target)
            else:
                self.simulation.restart()

        entity.pin(entity.x, entity.y)
        entity.drag.phase = 'pinned'
        entity.drag.moves = 0
        logger.debug(f"Drag start {entity_id} at ({entity.x:.1f}, {entity.y:.1f})")
        return True

    def drag_move(self, entity_id: str, x: float, y: float) -> bool:
        """
        Move the pin of a dragged entity to the pointer

        Returns:
            False if the entity is not being dragged
        """
        entity = self._lookup(entity_id, 'drag move')
        if entity is None or not entity.drag.active:
            return False
        entity.pin(x, y)
        entity.x, entity.y = x, y
        entity.drag.moves += 1
        return True

    def drag_end(self, entity_id: str) -> bool:
        """
        Release a dragged entity back to the relaxation engine

        Returns:
            False if the entity was not being dragged
        """
        entity = self._lookup(entity_id, 'drag end')
        if entity is None or not entity.drag.active:
            return False

        entity.unpin()
        entity.drag.phase = 'free'
        if self.state.active_drags == 0:
            self.simulation.set_alpha_target(0.0)
        logger.debug(f"Drag end {entity_id} after {entity.drag.moves} moves")
        return True
