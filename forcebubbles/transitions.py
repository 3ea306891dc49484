"""
Transition controller

Animates entity radii between steady-state values. Two kinds of transition
exist: the entrance (0 -> radius of the first year, elastic overshoot) and
year changes (current radius -> radius of the new year, polynomial ease-out).

A new transition always starts from the radius currently drawn, so
superseding a transition in flight never makes a bubble jump.
"""

from __future__ import annotations
from typing import Optional
import math
import logging

from .layout.types import LayoutState, Transition, Entity
from .types import EaseFunction, TransitionKind

logger = logging.getLogger(__name__)

TAU = 2 * math.pi


def elastic_out(amplitude: float = 1.0, period: float = 0.3) -> EaseFunction:
    """
    Elastic ease-out with overshoot

    Normalised so that ease(0) == 0 and ease(1) == 1 exactly.

    Args:
        amplitude: Overshoot amplitude (values below 1 are treated as 1)
        period: Oscillation period in normalised time
    """
    a = max(1.0, amplitude)
    p = period / TAU
    s = math.asin(1 / a) * p

    def ease(t: float) -> float:
        decay = (2 ** (-10 * t) - 0.0009765625) * 1.0009775171065494
        return 1 - a * decay * math.sin((t + s) / p)

    return ease


def poly_out(exponent: float = 3.0) -> EaseFunction:
    """Polynomial ease-out: 1 - (1 - t)^exponent"""

    def ease(t: float) -> float:
        return 1 - (1 - t) ** exponent

    return ease


class TransitionController:
    """
    Owns radius transitions of every entity in a LayoutState

    Entities are Idle (transition is None) or Transitioning. There is no
    cancel call: starting a transition replaces the one in flight.
    """

    def __init__(self, state: LayoutState, layout_config, transition_config):
        """
        Initialize transition controller

        Args:
            state: Shared layout state
            layout_config: Layout configuration (radius_scale)
            transition_config: Transition configuration (duration, easings)
        """
        self.state = state
        self.scale: float = layout_config.radius_scale
        self.config = transition_config
        self.enter_ease: EaseFunction = elastic_out(
            transition_config.elastic_amplitude, transition_config.elastic_period
        )
        self.update_ease: EaseFunction = poly_out(transition_config.poly_exponent)

    def enter(self, now: Optional[float] = None) -> None:
        """Start the entrance transition of every entity from radius 0"""
        now = self.state.now if now is None else now
        year = self.state.selected_year
        for entity in self.state.entities:
            entity.current_radius = 0.0
            self._start(entity, 'enter', entity.radius_at(year, self.scale), now)
        logger.debug(f"Entrance transition started for {len(self.state)} entities")

    def select_year(self, year: int, now: Optional[float] = None) -> bool:
        """
        Animate every entity to its radius for `year`

        Args:
            year: Newly selected year
            now: Session time (defaults to the state clock)

        Returns:
            False (and no state change) when year is outside the configured range
        """
        if not self.state.in_range(year):
            logger.debug(f"Ignoring year {year} outside {self.state.year_range}")
            return False

        now = self.state.now if now is None else now
        self.state.selected_year = year
        for entity in self.state.entities:
            self._start(entity, 'update', entity.radius_at(year, self.scale), now)
        return True

    def _start(self, entity: Entity, kind: TransitionKind, end_radius: float, now: float) -> None:
        ease = self.enter_ease if kind == 'enter' else self.update_ease
        entity.target_radius = end_radius
        entity.transition = Transition(
            kind=kind,
            start_radius=entity.current_radius,
            end_radius=end_radius,
            started_at=now,
            duration=self.config.duration,
            ease=ease
        )

    def step(self, now: Optional[float] = None) -> int:
        """
        Write interpolated radii for session time `now`

        Finished transitions write their exact end radius and become Idle.

        Returns:
            Number of entities still transitioning
        """
        now = self.state.now if now is None else now
        active = 0
        for entity in self.state.entities:
            transition = entity.transition
            if transition is None:
                continue
            entity.current_radius = max(0.0, transition.value(now))
            if transition.finished(now):
                entity.current_radius = transition.end_radius
                entity.transition = None
            else:
                active += 1
        return active
