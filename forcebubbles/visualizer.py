"""
Bubble visualizer

Draws a LayoutState with matplotlib: one circle per entity, the selected
year as title and a size legend. Can also record a session as an
animated GIF by driving its clock frame by frame.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING
import math
import logging

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.axes import Axes
from matplotlib.collections import PatchCollection
from matplotlib.figure import Figure
from matplotlib.patches import Circle

from .config import PlotConfig
from .layout.types import LayoutState

if TYPE_CHECKING:
    from .session import Visualisation

logger = logging.getLogger(__name__)


class BubblePlotter:
    """
    Renders force bubble layouts

    Canvas coordinates are screen-like: origin at the top left, y pointing down.
    """

    def __init__(self, config: Optional[PlotConfig] = None) -> None:
        """
        Initialize BubblePlotter

        Args:
            config: Visual configuration. If None, uses default settings.

        Example:
            >>> plotter = BubblePlotter()
            >>> plotter = BubblePlotter(PlotConfig.presentation())
        """
        self.config: PlotConfig = config or PlotConfig()

    def new_figure(self, state: LayoutState) -> Tuple[Figure, Axes]:
        """Figure sized so that one canvas unit is one pixel at config.dpi"""
        dpi = self.config.dpi
        fig = plt.figure(figsize=(state.width / dpi, state.height / dpi), dpi=dpi)
        ax = fig.add_axes([0, 0, 1, 1])
        return fig, ax

    def draw(
        self,
        state: LayoutState,
        ax: Axes,
        legend_tags: Optional[Tuple[str, str]] = None,
        title: Optional[str] = None
    ) -> None:
        """
        Draw the current frame of a layout onto an axes

        Args:
            state: Layout to draw
            ax: Target axes (cleared by the caller)
            legend_tags: (low, high) legend text; config defaults if None
            title: Title text; the selected year if None
        """
        cfg = self.config
        ax.set_facecolor(cfg.background)
        ax.set_xlim(0, state.width)
        ax.set_ylim(state.height, 0)
        ax.set_aspect('equal')
        ax.set_xticks([])
        ax.set_yticks([])
        for spine in ax.spines.values():
            spine.set_visible(False)

        patches = [
            Circle((entity.x, entity.y), entity.current_radius)
            for entity in state.entities
            if entity.current_radius > 0
        ]
        if patches:
            ax.add_collection(PatchCollection(
                patches,
                facecolor=cfg.bubble_color,
                edgecolor='white',
                linewidth=0.5,
                alpha=cfg.bubble_alpha
            ))

        if cfg.show_labels:
            for entity in state.entities:
                if entity.current_radius < max(cfg.label_min_radius, 1e-9):
                    continue
                ax.text(entity.x, entity.y, entity.id,
                        fontsize=cfg.label_fontsize, ha='center', va='center',
                        color='white', weight='bold')

        ax.text(state.width / 2, 10, title if title is not None else str(state.selected_year),
                fontsize=cfg.title_fontsize, ha='center', va='top', weight='bold')

        self._draw_legend(ax, legend_tags or (cfg.legend.low, cfg.legend.high))

    def _draw_legend(self, ax: Axes, legend_tags: Tuple[str, str]) -> None:
        """Two circles of increasing size labelled with the legend tags"""
        low_r, high_r = self.config.legend.sizes
        x = 150.0
        y = 25.0 + low_r
        for radius, tag in zip((low_r, high_r), legend_tags):
            ax.add_patch(Circle((x, y), radius, facecolor=self.config.bubble_color,
                                edgecolor='none'))
            ax.text(x + high_r + 6, y, tag, fontsize=9, ha='left', va='center')
            y += radius + 10 + high_r

    def plot(
        self,
        state: LayoutState,
        output_file: str = 'forcebubbles.png',
        legend_tags: Optional[Tuple[str, str]] = None,
        title: Optional[str] = None,
        show: bool = False
    ) -> Figure:
        """
        Save a snapshot of a layout

        Args:
            state: Layout to draw
            output_file: Path to save figure
            legend_tags: (low, high) legend text
            title: Title text; the selected year if None
            show: Whether to display the plot

        Returns:
            matplotlib Figure object

        Example:
            >>> vis.settle()
            >>> fig = plotter.plot(vis.state, 'population_2004.png')
        """
        fig, ax = self.new_figure(state)
        self.draw(state, ax, legend_tags=legend_tags, title=title)

        fig.savefig(output_file, dpi=self.config.dpi, facecolor=self.config.background,
                    edgecolor='none')
        logger.info(f"Plot saved to {output_file}")

        if show:
            plt.show()
        return fig

    def animate(
        self,
        vis: 'Visualisation',
        output_file: str = 'forcebubbles.gif',
        years: Optional[Sequence[int]] = None,
        frames_per_year: Optional[int] = None,
        entrance_frames: Optional[int] = None
    ) -> int:
        """
        Record a started session as an animated GIF

        The entrance animation plays first, then each year is selected in
        turn. The session clock advances by one frame interval per frame.

        Args:
            vis: Started Visualisation (its clock is advanced)
            output_file: Path to the GIF
            years: Years to visit; every year after the first if None
            frames_per_year: Frames between year changes; one transition if None
            entrance_frames: Frames for the entrance; one transition if None

        Returns:
            Number of frames written
        """
        if vis.state is None:
            raise ValueError("Visualisation must be started before animating")

        state = vis.state
        interval = 1000.0 / self.config.fps
        transition_frames = math.ceil(self.config.transitions.duration / interval)
        if frames_per_year is None:
            frames_per_year = transition_frames
        if entrance_frames is None:
            entrance_frames = transition_frames
        if years is None:
            start, end = state.year_range
            years = list(range(start + 1, end + 1))

        schedule: List[Optional[int]] = [None] * entrance_frames
        for year in years:
            schedule.append(year)
            schedule.extend([None] * (frames_per_year - 1))

        fig, ax = self.new_figure(state)
        legend_tags = vis.legend_tags

        def init():
            ax.clear()
            self.draw(state, ax, legend_tags=legend_tags)
            return []

        def update(frame_index):
            year = schedule[frame_index]
            if year is not None:
                vis.select_year(year)
            vis.advance(interval)
            ax.clear()
            self.draw(state, ax, legend_tags=legend_tags)
            return []

        animation = FuncAnimation(fig, update, frames=len(schedule), init_func=init,
                                  interval=interval, blit=False, repeat=False)
        animation.save(output_file, writer=PillowWriter(fps=self.config.fps), dpi=self.config.dpi)
        plt.close(fig)

        logger.info(f"Animation saved to {output_file} ({len(schedule)} frames)")
        return len(schedule)
