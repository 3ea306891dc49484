"""
Force relaxation engine for ForceBubbles
Discrete-time force simulation over all entities

Each tick:
1. alpha decays toward alpha_target
2. Many-body charge pushes free entities apart
3. Collision resolves overlaps using the live current_radius of every entity
4. Centering forces pull free entities toward the canvas centre
5. Velocities are damped and integrated; pinned entities snap to their pin

The engine reads current_radius from the entities on every tick and never
caches radii, so radius transitions are reflected in the same frame.
"""
from __future__ import annotations
from typing import List, Tuple
import logging

import numpy as np

from .types import LayoutState

logger = logging.getLogger(__name__)


class ForceSimulation:
    """
    Force relaxation over a LayoutState

    Attributes:
        alpha: Current activity level
        alpha_target: Value alpha decays toward
        running: Whether frames should tick the engine
        ticks: Ticks run so far
    """

    def __init__(self, state: LayoutState, config, seed: int = 0):
        """
        Initialize force simulation

        Args:
            state: Shared layout state (entities are mutated in place)
            config: Force configuration
            seed: Seed for the jiggle applied to coincident entities
        """
        self.state = state
        self.config = config
        self.alpha: float = config.alpha_start
        self.alpha_target: float = 0.0
        self.running: bool = True
        self.ticks: int = 0
        self._rng = np.random.default_rng(seed)

        logger.debug(f"ForceSimulation initialized: {len(state)} entities, "
                     f"strength={config.strength}, charge={config.charge_strength}")

    # ============================================================
    # ACTIVITY CONTROL
    # ============================================================

    def restart(self) -> 'ForceSimulation':
        """Resume ticking"""
        self.running = True
        return self

    def stop(self) -> 'ForceSimulation':
        self.running = False
        return self

    def reheat(self, alpha: float) -> 'ForceSimulation':
        """Set alpha and resume ticking"""
        self.alpha = alpha
        return self.restart()

    def set_alpha_target(self, target: float) -> 'ForceSimulation':
        self.alpha_target = target
        return self

    @property
    def settled(self) -> bool:
        return self.alpha < self.config.alpha_min

    # ============================================================
    # STEPPING
    # ============================================================

    def step(self) -> bool:
        """
        Run one tick if running, stopping once alpha falls below alpha_min

        Returns:
            True if a tick was run
        """
        if not self.running:
            return False
        self.tick()
        if self.settled:
            self.running = False
            logger.debug(f"Simulation settled after {self.ticks} ticks")
        return True

    def tick(self) -> None:
        """Advance the simulation by one tick"""
        cfg = self.config
        entities = self.state.entities
        self.alpha += (self.alpha_target - self.alpha) * cfg.alpha_decay
        self.ticks += 1
        if not entities:
            return
        alpha = self.alpha

        x = np.array([e.x for e in entities], dtype=float)
        y = np.array([e.y for e in entities], dtype=float)
        vx = np.array([e.vx for e in entities], dtype=float)
        vy = np.array([e.vy for e in entities], dtype=float)
        radii = np.array([max(0.0, e.current_radius) for e in entities], dtype=float)
        pinned = np.array([e.is_pinned for e in entities], dtype=bool)
        free = ~pinned

        # Pinned entities act from their pinned position
        for idx in np.nonzero(pinned)[0]:
            x[idx] = entities[idx].pinned_x
            y[idx] = entities[idx].pinned_y
            vx[idx] = vy[idx] = 0.0

        self._apply_charge(x, y, vx, vy, free, alpha)
        for _ in range(cfg.collide_iterations):
            self._apply_collide(x, y, vx, vy, radii, pinned)
        self._apply_center(x, y, vx, vy, free, alpha)

        # Integrate
        friction = 1.0 - cfg.velocity_decay
        vx[free] *= friction
        vy[free] *= friction
        x[free] += vx[free]
        y[free] += vy[free]
        vx[pinned] = 0.0
        vy[pinned] = 0.0

        for idx, entity in enumerate(entities):
            if pinned[idx]:
                entity.x = entity.pinned_x
                entity.y = entity.pinned_y
            else:
                entity.x = float(x[idx])
                entity.y = float(y[idx])
            entity.vx = float(vx[idx])
            entity.vy = float(vy[idx])

    # ============================================================
    # FORCES
    # ============================================================

    def _apply_charge(
        self,
        x: np.ndarray,
        y: np.ndarray,
        vx: np.ndarray,
        vy: np.ndarray,
        free: np.ndarray,
        alpha: float
    ) -> None:
        """Exact many-body force; every entity is a source, only free ones move"""
        if len(x) < 2 or not free.any():
            return
        dmin2 = self.config.distance_min ** 2
        dx = x[None, :] - x[:, None]
        dy = y[None, :] - y[:, None]
        l = dx * dx + dy * dy
        l = np.where(l < dmin2, np.sqrt(dmin2 * l), l)
        with np.errstate(divide='ignore', invalid='ignore'):
            w = np.where(l > 0, self.config.charge_strength * alpha / l, 0.0)
        vx[free] += (dx * w).sum(axis=1)[free]
        vy[free] += (dy * w).sum(axis=1)[free]

    def _apply_collide(
        self,
        x: np.ndarray,
        y: np.ndarray,
        vx: np.ndarray,
        vy: np.ndarray,
        radii: np.ndarray,
        pinned: np.ndarray
    ) -> None:
        """
        Resolve overlaps on predicted positions (x + vx)

        Minimum centre distance is r_i + r_j + padding. Pushes are split by
        r^2; a pinned entity does not move, so its partner takes the full push.
        """
        n = len(x)
        if n < 2:
            return
        padding = self.config.collide_padding
        strength = self.config.collide_strength

        for i, j in self._candidate_pairs(x + vx, y + vy, radii, padding):
            if pinned[i] and pinned[j]:
                continue
            min_dist = radii[i] + radii[j] + padding
            dx = (x[i] + vx[i]) - (x[j] + vx[j])
            dy = (y[i] + vy[i]) - (y[j] + vy[j])
            l = dx * dx + dy * dy
            if l >= min_dist * min_dist:
                continue
            if dx == 0:
                dx = self._jiggle()
                l += dx * dx
            if dy == 0:
                dy = self._jiggle()
                l += dy * dy
            l = np.sqrt(l)
            push = (min_dist - l) / l * strength
            dx *= push
            dy *= push

            if pinned[j]:
                share_i = 1.0
            elif pinned[i]:
                share_i = 0.0
            else:
                ri2 = radii[i] * radii[i]
                rj2 = radii[j] * radii[j]
                share_i = rj2 / (ri2 + rj2) if ri2 + rj2 > 0 else 0.5
            vx[i] += dx * share_i
            vy[i] += dy * share_i
            vx[j] -= dx * (1.0 - share_i)
            vy[j] -= dy * (1.0 - share_i)

    @staticmethod
    def _candidate_pairs(
        px: np.ndarray,
        py: np.ndarray,
        radii: np.ndarray,
        padding: float
    ) -> List[Tuple[int, int]]:
        """Pairs (i < j) overlapping at the predicted positions"""
        dx = px[:, None] - px[None, :]
        dy = py[:, None] - py[None, :]
        reach = radii[:, None] + radii[None, :] + padding
        overlapping = np.triu(dx * dx + dy * dy < reach * reach, k=1)
        ii, jj = np.nonzero(overlapping)
        return list(zip(ii.tolist(), jj.tolist()))

    def _apply_center(
        self,
        x: np.ndarray,
        y: np.ndarray,
        vx: np.ndarray,
        vy: np.ndarray,
        free: np.ndarray,
        alpha: float
    ) -> None:
        """Independent x and y pulls toward the canvas centre"""
        cx, cy = self.state.center
        k = self.config.strength * alpha
        vx[free] += (cx - x[free]) * k
        vy[free] += (cy - y[free]) * k

    def _jiggle(self) -> float:
        return (self._rng.random() - 0.5) * 1e-6


def find_overlaps(
    state: LayoutState,
    padding: float = 1.0,
    tolerance: float = 0.0
) -> List[Tuple[str, str, float]]:
    """
    Pairs closer than r_a + r_b + padding - tolerance

    Args:
        state: Layout state
        padding: Required gap between circles
        tolerance: Allowed numerical slack

    Returns:
        List of (id_a, id_b, shortfall) tuples
    """
    entities = state.entities
    if len(entities) < 2:
        return []
    x = np.array([e.x for e in entities], dtype=float)
    y = np.array([e.y for e in entities], dtype=float)
    r = np.array([e.current_radius for e in entities], dtype=float)
    dist = np.hypot(x[:, None] - x[None, :], y[:, None] - y[None, :])
    required = r[:, None] + r[None, :] + padding
    shortfall = required - dist
    ii, jj = np.nonzero(np.triu(shortfall > tolerance, k=1))
    return [(entities[i].id, entities[j].id, float(shortfall[i, j])) for i, j in zip(ii, jj)]
