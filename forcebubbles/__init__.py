"""ForceBubbles: Animated force-directed bubble charts of per-entity time series"""

from .config import PlotConfig, LayoutConfig, ForceConfig, TransitionConfig, LegendConfig
from .session import Visualisation, NotConfiguredError
from .store import EntityStore
from .transitions import TransitionController
from .interaction import InteractionHandler
from . import utils
from .visualizer import BubblePlotter

__version__ = "0.1.0"
__all__ = ["PlotConfig", "LayoutConfig", "ForceConfig", "TransitionConfig", "LegendConfig",
           "Visualisation", "NotConfiguredError", "EntityStore", "TransitionController",
           "InteractionHandler", "utils", "BubblePlotter"]
