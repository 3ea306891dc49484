"""
ForceBubbles Configuration
Layout, force, transition and rendering parameters with documented defaults
"""
from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class LayoutConfig:
    """
    Canvas and sizing parameters

    Bubble area is proportional to value: radius = sqrt(value) * radius_scale.
    """

    # ============================================================
    # CANVAS
    # ============================================================
    width: float = 960.0
    """Width of the bounding rectangle (px)"""

    height: float = 600.0
    """Height of the bounding rectangle (px)"""

    # ============================================================
    # SIZING
    # ============================================================
    radius_scale: float = 0.0050
    """Scale constant k: radius = sqrt(value) * k"""

    # ============================================================
    # INITIAL PACKING
    # ============================================================
    pack_padding: float = 1.5
    """Gap between packed circles in the initial packing (px)"""

    magnification: float = 3.0
    """Packed positions are pushed out from the centre by this factor"""

    # ============================================================
    # CONSTRAINED DEVICES
    # ============================================================
    constrained_threshold: float = 500000
    """On constrained devices, entities below this first-year value are dropped"""

    @property
    def center(self) -> Tuple[float, float]:
        """Centre of the bounding rectangle"""
        return self.width * 0.5, self.height * 0.5


@dataclass
class ForceConfig:
    """
    Force relaxation parameters

    Defaults mirror a standard d3-style force simulation with a many-body
    charge, a collision force and two centering forces.
    """

    # ============================================================
    # CENTERING
    # ============================================================
    strength: float = 0.2
    """Strength of the x/y centering forces"""

    # ============================================================
    # MANY-BODY
    # ============================================================
    charge_strength: float = -30.0
    """Charge per node; negative values repel"""

    distance_min: float = 1.0
    """Softening distance below which the charge force stops growing (px)"""

    # ============================================================
    # COLLISION
    # ============================================================
    collide_padding: float = 1.0
    """Extra separation added to the sum of radii (px)"""

    collide_strength: float = 1.0
    """Fraction of an overlap resolved per iteration"""

    collide_iterations: int = 1
    """Collision passes per tick"""

    # ============================================================
    # ALPHA (ACTIVITY LEVEL)
    # ============================================================
    alpha_start: float = 1.0
    """Initial activity level"""

    alpha_min: float = 0.001
    """Ticking stops once alpha falls below this"""

    alpha_decay_ticks: int = 300
    """Ticks needed to decay from 1 to alpha_min with a zero target"""

    velocity_decay: float = 0.4
    """Fraction of velocity lost per tick (friction)"""

    reheat_alpha: float = 0.2
    """Alpha set when the selected year changes"""

    drag_alpha_target: float = 0.2
    """Alpha target held while an entity is being dragged"""

    @property
    def alpha_decay(self) -> float:
        """Per-tick decay rate derived from alpha_min and alpha_decay_ticks"""
        return 1 - self.alpha_min ** (1 / self.alpha_decay_ticks)


@dataclass
class TransitionConfig:
    """Radius tween parameters"""

    duration: float = 2000.0
    """Duration of every radius transition (ms)"""

    elastic_amplitude: float = 1.0
    """Amplitude of the elastic entrance easing"""

    elastic_period: float = 0.3
    """Period of the elastic entrance easing"""

    poly_exponent: float = 3.0
    """Exponent of the polynomial ease-out used for year changes"""


@dataclass
class LegendConfig:
    """Size legend text and marker sizes"""

    low: str = 'less'
    """Legend text for the small marker"""

    high: str = 'more'
    """Legend text for the large marker"""

    sizes: Tuple[float, float] = (5.0, 10.0)
    """Marker radii for the low and high entries (px)"""


@dataclass
class PlotConfig:
    """
    Complete configuration

    Bundles the engine configuration with the rendering parameters.
    """

    # ============================================================
    # SUB-CONFIGURATIONS
    # ============================================================
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    """Canvas and sizing configuration"""

    forces: ForceConfig = field(default_factory=ForceConfig)
    """Force relaxation configuration"""

    transitions: TransitionConfig = field(default_factory=TransitionConfig)
    """Radius tween configuration"""

    legend: LegendConfig = field(default_factory=LegendConfig)
    """Legend configuration"""

    # ============================================================
    # RENDERING
    # ============================================================
    background: str = '#eee'
    """Canvas background colour"""

    bubble_color: str = '#1f77b4'
    """Bubble fill colour (first colour of the tab20 palette)"""

    bubble_alpha: float = 0.9
    """Bubble fill transparency"""

    show_labels: bool = True
    """Draw entity codes inside bubbles"""

    label_min_radius: float = 12.0
    """Bubbles smaller than this are not labelled (px)"""

    label_fontsize: int = 7
    """Font size for bubble labels"""

    title_fontsize: int = 14
    """Font size for the year title"""

    dpi: int = 100
    """DPI for saved figures; figure size follows the canvas size"""

    fps: int = 30
    """Frames per second for animations"""

    # ============================================================
    # PRESET CONFIGURATIONS
    # ============================================================

    @classmethod
    def mobile(cls) -> 'PlotConfig':
        """
        Settings for small screens

        - Narrow canvas
        - Lower frame rate

        Example:
            >>> config = PlotConfig.mobile()
            >>> vis = Visualisation(config)
        """
        config = cls()
        config.layout.width = 480.0
        config.layout.height = 640.0
        config.fps = 20
        config.label_min_radius = 16.0
        return config

    @classmethod
    def presentation(cls) -> 'PlotConfig':
        """
        Settings optimized for presentations

        - Larger canvas and bubbles
        - Larger fonts

        Example:
            >>> config = PlotConfig.presentation()
            >>> plotter = BubblePlotter(config)
        """
        config = cls()
        config.layout.width = 1280.0
        config.layout.height = 800.0
        config.layout.radius_scale = 0.0065
        config.title_fontsize = 20
        config.label_fontsize = 9
        config.dpi = 150
        return config

    @classmethod
    def debug(cls) -> 'PlotConfig':
        """
        Settings for debugging layout issues

        - Short transitions
        - Every bubble labelled
        - Opaque fills

        Example:
            >>> config = PlotConfig.debug()
            >>> vis = Visualisation(config)
        """
        config = cls()
        config.transitions.duration = 200.0
        config.label_min_radius = 0.0
        config.bubble_alpha = 1.0
        return config
