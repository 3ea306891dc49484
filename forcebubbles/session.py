"""
Visualisation session

One Visualisation owns one LayoutState and the components that mutate it.
A frame advances radius transitions first and then runs one relaxation
tick, so the collision pass always sees the radii of the current frame.
The engine keeps ticking for as long as any transition is in flight.

Example:
    >>> vis = Visualisation()
    >>> vis.set_year_range(2000, 2004)
    >>> vis.start(rows)
    >>> vis.run(2500)
    >>> vis.select_year(2003)
    >>> vis.settle()
"""

from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Optional, Tuple
import logging

from .config import PlotConfig
from .store import EntityStore
from .transitions import TransitionController
from .interaction import InteractionHandler
from .layout import ForceSimulation, LayoutState, PackingInitializer
from .types import EntityRow

logger = logging.getLogger(__name__)

FRAME_INTERVAL = 1000.0 / 60.0
"""Default frame interval (ms), one animation frame at 60 fps"""


class NotConfiguredError(RuntimeError):
    """Raised when a visualisation is started without a valid year range"""


class Visualisation:
    """
    Force bubble visualisation of a per-entity time series

    Call set_year_range() before start(). set_legend_tags() only affects
    sessions started after it is called.
    """

    def __init__(self, config: Optional[PlotConfig] = None, seed: int = 0) -> None:
        """
        Initialize Visualisation

        Args:
            config: Engine and rendering configuration. If None, uses default settings.
            seed: Seed for the packing shuffle and collision jiggle

        Example:
            >>> vis = Visualisation()
            >>> vis = Visualisation(PlotConfig.mobile())
        """
        self.config: PlotConfig = config or PlotConfig()
        self.seed: int = seed
        self.syear: Optional[int] = None
        self.eyear: Optional[int] = None
        self.lowtag: Optional[str] = None
        self.hightag: Optional[str] = None

        self.store: Optional[EntityStore] = None
        self.state: Optional[LayoutState] = None
        self.simulation: Optional[ForceSimulation] = None
        self.transitions: Optional[TransitionController] = None
        self.interaction: Optional[InteractionHandler] = None

    # ============================================================
    # CONFIGURATION
    # ============================================================

    def set_year_range(self, start: int, end: int) -> None:
        """Set the inclusive year range; required before start()"""
        self.syear = start
        self.eyear = end

    def get_year_range(self) -> Tuple[Optional[int], Optional[int]]:
        """(start, end), or (None, None) before set_year_range()"""
        return self.syear, self.eyear

    def set_legend_tags(self, low: str = 'less', high: str = 'more') -> None:
        """Set the legend text for small and large bubbles"""
        self.lowtag = low
        self.hightag = high

    @property
    def legend_tags(self) -> Tuple[str, str]:
        low = self.lowtag if self.lowtag is not None else self.config.legend.low
        high = self.hightag if self.hightag is not None else self.config.legend.high
        return low, high

    def get_data(self) -> Optional[List[EntityRow]]:
        """Rows kept after excluding aggregates; None before start()"""
        if self.store is None:
            return None
        return self.store.data

    # ============================================================
    # LIFECYCLE
    # ============================================================

    @property
    def started(self) -> bool:
        return self.state is not None

    @property
    def selected_year(self) -> Optional[int]:
        return self.state.selected_year if self.state is not None else None

    def start(
        self,
        rows: Iterable[Mapping[str, Any]],
        constrained: bool = False
    ) -> LayoutState:
        """
        Build the layout and start the entrance animation

        Any previous session state is discarded.

        Args:
            rows: Input rows (see EntityStore.from_rows)
            constrained: Host device is resource constrained

        Returns:
            The new LayoutState

        Raises:
            NotConfiguredError: If the year range is unset or inverted
        """
        if self.syear is None or self.eyear is None:
            logger.error("Year range not defined, call set_year_range() first")
            raise NotConfiguredError("Year range not defined, call set_year_range() first")
        if self.syear > self.eyear:
            logger.error(f"Invalid year range {self.syear}-{self.eyear}")
            raise NotConfiguredError(f"Invalid year range {self.syear}-{self.eyear}")

        if self.lowtag is None or self.hightag is None:
            self.set_legend_tags(self.config.legend.low, self.config.legend.high)

        layout_cfg = self.config.layout
        year_range = (self.syear, self.eyear)

        self.store = EntityStore.from_rows(
            rows,
            year_range,
            constrained=constrained,
            threshold=layout_cfg.constrained_threshold
        )

        state = LayoutState(
            entities=list(self.store.entities),
            width=layout_cfg.width,
            height=layout_cfg.height,
            year_range=year_range,
            selected_year=self.syear
        )
        PackingInitializer(layout_cfg, seed=self.seed).initialize(state.entities)

        self.state = state
        self.simulation = ForceSimulation(state, self.config.forces, seed=self.seed)
        self.transitions = TransitionController(state, layout_cfg, self.config.transitions)
        self.interaction = InteractionHandler(state, self.simulation, self.config.forces)
        self.transitions.enter(state.now)

        logger.info(f"Visualisation started: {len(state)} entities, "
                    f"years {self.syear}-{self.eyear}")
        return state

    def _require_started(self, action: str) -> bool:
        if self.state is None:
            logger.warning(f"Cannot {action}: visualisation not started")
            return False
        return True

    # ============================================================
    # EVENTS
    # ============================================================

    def select_year(self, year: int) -> bool:
        """
        Switch to a new year

        Out-of-range years are ignored: nothing changes.

        Returns:
            True if the year was applied
        """
        if not self._require_started('select year'):
            return False
        if not self.state.in_range(year):
            logger.debug(f"Year {year} outside {self.syear}-{self.eyear}, ignored")
            return False

        self.simulation.reheat(self.config.forces.reheat_alpha)
        self.transitions.select_year(year, self.state.now)
        self.simulation.set_alpha_target(0.0)
        logger.info(f"Selected year {year}")
        return True

    def drag_start(self, entity_id: str) -> bool:
        if not self._require_started('drag'):
            return False
        return self.interaction.drag_start(entity_id)

    def drag_move(self, entity_id: str, x: float, y: float) -> bool:
        if not self._require_started('drag'):
            return False
        return self.interaction.drag_move(entity_id, x, y)

    def drag_end(self, entity_id: str) -> bool:
        if not self._require_started('drag'):
            return False
        return self.interaction.drag_end(entity_id)

    # ============================================================
    # FRAMES
    # ============================================================

    def frame(self, now: Optional[float] = None) -> None:
        """
        Run one animation frame

        Args:
            now: Session time (ms); defaults to one frame interval after the last frame
        """
        if not self._require_started('run frame'):
            return
        state = self.state
        state.now = state.now + FRAME_INTERVAL if now is None else max(state.now, now)

        # Radii still changing: collisions must be resolved even if alpha is spent
        if not state.is_idle:
            self.simulation.restart()
        self.transitions.step(state.now)
        self.simulation.step()
        state.frame_count += 1

    def advance(self, ms: float) -> None:
        """Run a single frame `ms` after the previous one"""
        if not self._require_started('advance'):
            return
        self.frame(self.state.now + ms)

    def run(self, duration: float, interval: float = FRAME_INTERVAL) -> int:
        """
        Run frames at a fixed interval for `duration` ms

        Returns:
            Number of frames run
        """
        if not self._require_started('run'):
            return 0
        n_frames = max(0, int(round(duration / interval)))
        for _ in range(n_frames):
            self.advance(interval)
        return n_frames

    @property
    def is_settled(self) -> bool:
        """No transition in flight, no drag active and the simulation stopped"""
        if self.state is None:
            return False
        return (self.state.is_idle
                and self.state.active_drags == 0
                and not self.simulation.running)

    def settle(self, max_frames: int = 5000, interval: float = FRAME_INTERVAL) -> int:
        """
        Run frames until the layout is settled

        Returns:
            Number of frames run
        """
        if not self._require_started('settle'):
            return 0
        frames = 0
        while not self.is_settled and frames < max_frames:
            self.advance(interval)
            frames += 1
        if not self.is_settled:
            logger.warning(f"Layout not settled after {frames} frames "
                           f"(alpha={self.simulation.alpha:.4f})")
        return frames
