"""
Layout types for ForceBubbles
Per-entity state and the shared Layout State

Unlike result types, these are mutable: the relaxation engine, the
transition controller and the interaction handler all write to them
every frame, and the renderer reads them.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Tuple, Optional, Iterator
import math

from ..types import EaseFunction, TransitionKind, DragPhase


@dataclass
class Transition:
    """
    Radius tween in flight for one entity

    Attributes:
        kind: 'enter' for the opening animation, 'update' for a year change
        start_radius: Radius at the moment the transition started
        end_radius: Steady-state radius being animated to
        started_at: Session time the transition started (ms)
        duration: Length of the transition (ms)
        ease: Easing curve applied to normalised time
    """
    kind: TransitionKind
    start_radius: float
    end_radius: float
    started_at: float
    duration: float
    ease: EaseFunction

    def progress(self, now: float) -> float:
        """Normalised time in [0, 1]"""
        if self.duration <= 0:
            return 1.0
        t = (now - self.started_at) / self.duration
        return min(1.0, max(0.0, t))

    def value(self, now: float) -> float:
        """Interpolated radius at session time `now`"""
        t = self.progress(now)
        if t >= 1.0:
            return self.end_radius
        eased = self.ease(t)
        return self.start_radius + (self.end_radius - self.start_radius) * eased

    def finished(self, now: float) -> bool:
        """Whether the transition has reached its end"""
        return self.progress(now) >= 1.0


@dataclass
class DragState:
    """Drag gesture state of one entity"""
    phase: DragPhase = 'free'
    moves: int = 0

    @property
    def active(self) -> bool:
        return self.phase == 'pinned'


@dataclass
class Entity:
    """
    One bubble

    Attributes:
        id: Unique entity code (e.g. 'USA')
        name: Display name
        series: One value per year; index i is year start_year + i
        start_year: First year covered by the series
        current_radius: Radius drawn this frame (animated)
        target_radius: Steady-state radius for the selected year
        x, y: Position
        vx, vy: Velocity used by the relaxation engine
        pinned_x, pinned_y: Pinned position while dragged, else None
        transition: Radius tween in flight, None when idle
        drag: Drag gesture state
    """
    id: str
    name: str
    series: Tuple[float, ...]
    start_year: int
    current_radius: float = 0.0
    target_radius: float = 0.0
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    pinned_x: Optional[float] = None
    pinned_y: Optional[float] = None
    transition: Optional[Transition] = None
    drag: DragState = field(default_factory=DragState)

    @property
    def end_year(self) -> int:
        return self.start_year + len(self.series) - 1

    @property
    def is_pinned(self) -> bool:
        return self.pinned_x is not None and self.pinned_y is not None

    @property
    def is_transitioning(self) -> bool:
        return self.transition is not None

    def value_at(self, year: int) -> float:
        """Value for a year inside the series range"""
        return self.series[year - self.start_year]

    def radius_at(self, year: int, scale: float) -> float:
        """Steady-state radius for a year: sqrt(value) * scale"""
        return radius_for_value(self.value_at(year), scale)

    def pin(self, x: float, y: float) -> None:
        self.pinned_x = x
        self.pinned_y = y

    def unpin(self) -> None:
        self.pinned_x = None
        self.pinned_y = None


def radius_for_value(value: float, scale: float) -> float:
    """Radius whose area is proportional to value; negatives count as zero"""
    return math.sqrt(max(0.0, value)) * scale


@dataclass
class LayoutState:
    """
    Shared per-session layout state

    Exactly one instance per Visualisation. Holds the entities and the
    session clock; every component mutates entities through this object.

    Attributes:
        entities: Entities in input order
        width, height: Bounding rectangle
        year_range: Inclusive (start, end) years
        selected_year: Year currently displayed
        now: Session clock (ms)
        frame_count: Frames run so far
    """
    entities: List[Entity]
    width: float
    height: float
    year_range: Tuple[int, int]
    selected_year: int
    now: float = 0.0
    frame_count: int = 0
    _index: Dict[str, Entity] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._index = {entity.id: entity for entity in self.entities}

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._index

    @property
    def center(self) -> Tuple[float, float]:
        return self.width * 0.5, self.height * 0.5

    def get(self, entity_id: str) -> Optional[Entity]:
        """Entity by id, or None"""
        return self._index.get(entity_id)

    def in_range(self, year: int) -> bool:
        start, end = self.year_range
        return start <= year <= end

    @property
    def active_drags(self) -> int:
        """Number of entities currently being dragged"""
        return sum(1 for entity in self.entities if entity.drag.active)

    @property
    def is_idle(self) -> bool:
        """No transition in flight"""
        return not any(entity.is_transitioning for entity in self.entities)
